"""
Join channel use case.
"""

from salon.application.services.authorization_gate import AuthorizationGate
from salon.domain.entities.channel import Channel
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import NotFoundError
from salon.domain.repositories.i_channel_store import IChannelStore


class JoinChannel:
    """
    Use case for joining a channel.

    Business rules:
    - Only public channels can be joined without an invitation
    - Joining twice is a no-op
    """

    def __init__(self, channel_store: IChannelStore, gate: AuthorizationGate):
        self.channel_store = channel_store
        self.gate = gate

    async def execute(self, principal: Principal, channel_id: int) -> Channel:
        """
        Join a channel.

        Returns:
            Channel with its updated member count

        Raises:
            NotFoundError: If the channel does not exist
            AuthorizationError: If the channel is private
        """
        channel = await self.channel_store.find_by_id(channel_id)
        if channel is None:
            raise NotFoundError("Channel", channel_id)

        await self.gate.ensure_can_join(principal, channel)
        await self.channel_store.add_member(channel.id, principal.id)

        return await self.channel_store.find_by_id(channel.id) or channel
