"""
Channel entity - a named messaging room.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from salon.domain.timestamps import utc_now
from salon.domain.value_objects.topic import Topic


class Visibility(str, Enum):
    """Who may join a channel on their own."""

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass(frozen=True)
class Channel:
    """
    Channel entity.

    Business rules:
    - Name and slug are globally unique
    - Slug and visibility never change after creation
    - The creator is always the first member
    - Channels are never hard-deleted

    Attributes:
        id: Database identifier (opaque to clients)
        name: Unique human readable name
        slug: Unique lower-kebab identifier derived from the name
        created_by: Principal id of the creator
        visibility: Public (open join) or private (invitation only)
        description: Optional free text
        created_at: Creation timestamp (UTC)
        member_count: Number of members when the entity was loaded
    """

    id: int
    name: str
    slug: str
    created_by: str
    visibility: Visibility = Visibility.PUBLIC
    description: Optional[str] = None
    created_at: datetime = field(default_factory=utc_now)
    member_count: int = 0

    def is_public(self) -> bool:
        """Check if anyone may join this channel."""
        return self.visibility == Visibility.PUBLIC

    def is_private(self) -> bool:
        """Check if this channel is invitation only."""
        return self.visibility == Visibility.PRIVATE

    @property
    def topic(self) -> Topic:
        """Live fan-out topic of this channel."""
        return Topic.for_channel(self.id)
