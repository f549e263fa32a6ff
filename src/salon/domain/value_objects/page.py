"""
Page value object - one ordered slice of a larger result set.
"""

import math
from dataclasses import dataclass, field
from typing import Generic, List, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """
    Ordered page of persisted items.

    Pages are 1-based. A page past the end has no items but still reports
    the correct totals.

    Attributes:
        items: Items on this page, already ordered
        page: Page number (1-based)
        page_size: Requested page size
        total: Total number of items across all pages
    """

    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 20
    total: int = 0

    @staticmethod
    def offset_for(page: int, page_size: int) -> int:
        """
        Row offset of a page.

        Raises:
            ValueError: If page or page_size is not positive
        """
        if page < 1:
            raise ValueError("Page must be >= 1")
        if page_size < 1:
            raise ValueError("Page size must be >= 1")
        return (page - 1) * page_size

    @property
    def last_page(self) -> int:
        """Number of the last page (at least 1)."""
        return max(1, math.ceil(self.total / self.page_size))

    @property
    def has_more(self) -> bool:
        """Check if a later page exists."""
        return self.page < self.last_page
