"""
List channels use case.
"""

from salon.domain.entities.channel import Channel
from salon.domain.entities.principal import Principal
from salon.domain.repositories.i_channel_store import IChannelStore
from salon.domain.value_objects.page import Page


class ListChannels:
    """
    Use case for paging through channels, newest first.

    Page sizes are clamped to ``max_page_size``.
    """

    def __init__(
        self,
        channel_store: IChannelStore,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ):
        self.channel_store = channel_store
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def _page_size(self, page_size: int | None) -> int:
        if not page_size:
            return self.default_page_size
        return max(1, min(page_size, self.max_page_size))

    async def public(self, page: int = 1, page_size: int | None = None) -> Page[Channel]:
        """Public channels."""
        return await self.channel_store.list_public(
            max(1, page), self._page_size(page_size)
        )

    async def mine(
        self, principal: Principal, page: int = 1, page_size: int | None = None
    ) -> Page[Channel]:
        """Channels the principal is a member of."""
        return await self.channel_store.list_for_user(
            principal.id, max(1, page), self._page_size(page_size)
        )
