"""
Get channel use case.
"""

from salon.application.services.authorization_gate import AuthorizationGate
from salon.domain.entities.channel import Channel
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import NotFoundError
from salon.domain.repositories.i_channel_store import IChannelStore


class GetChannel:
    """
    Use case for looking up a single channel.

    Private channels are reported as not found to non-members.
    """

    def __init__(self, channel_store: IChannelStore, gate: AuthorizationGate):
        self.channel_store = channel_store
        self.gate = gate

    async def by_id(self, principal: Principal, channel_id: int) -> Channel:
        channel = await self.channel_store.find_by_id(channel_id)
        if channel is None:
            raise NotFoundError("Channel", channel_id)

        await self.gate.ensure_visible(principal, channel)
        return channel

    async def by_slug(self, principal: Principal, slug: str) -> Channel:
        channel = await self.channel_store.find_by_slug(slug)
        if channel is None:
            raise NotFoundError("Channel", slug)

        await self.gate.ensure_visible(principal, channel)
        return channel
