"""
Get message history use case.
"""

from salon.application.services.authorization_gate import AuthorizationGate
from salon.domain.entities.message import Message
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import NotFoundError
from salon.domain.repositories.i_channel_store import IChannelStore
from salon.domain.repositories.i_message_store import IMessageStore
from salon.domain.value_objects.page import Page


class GetMessageHistory:
    """
    Use case for reading a channel's history, oldest first.

    Business rules:
    - Only members may read
    - Private channels are reported as not found to non-members
    """

    def __init__(
        self,
        channel_store: IChannelStore,
        message_store: IMessageStore,
        gate: AuthorizationGate,
        default_page_size: int = 50,
        max_page_size: int = 100,
    ):
        self.channel_store = channel_store
        self.message_store = message_store
        self.gate = gate
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def execute(
        self,
        principal: Principal,
        channel_id: int,
        page: int = 1,
        page_size: int | None = None,
    ) -> Page[Message]:
        """
        Get one page of history.

        Raises:
            NotFoundError: If the channel does not exist or is hidden
            AuthorizationError: If the principal is not a member
        """
        channel = await self.channel_store.find_by_id(channel_id)
        if channel is None:
            raise NotFoundError("Channel", channel_id)

        await self.gate.ensure_visible(principal, channel)
        await self.gate.ensure_can_read(principal, channel)

        size = self.default_page_size if not page_size else page_size
        size = max(1, min(size, self.max_page_size))
        return await self.message_store.page_for_channel(channel.id, max(1, page), size)
