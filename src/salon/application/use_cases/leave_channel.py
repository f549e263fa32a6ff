"""
Leave channel use case.
"""

from salon.application.services.authorization_gate import AuthorizationGate
from salon.application.services.presence_broker import PresenceBroker
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import NotFoundError
from salon.domain.repositories.i_channel_store import IChannelStore


class LeaveChannel:
    """
    Use case for leaving a channel.

    Removes the membership and tears down the principal's live
    subscriptions on the channel. Leaving twice is a no-op.
    """

    def __init__(
        self,
        channel_store: IChannelStore,
        gate: AuthorizationGate,
        broker: PresenceBroker,
    ):
        self.channel_store = channel_store
        self.gate = gate
        self.broker = broker

    async def execute(self, principal: Principal, channel_id: int) -> bool:
        """
        Leave a channel.

        Returns:
            True if a membership was removed

        Raises:
            NotFoundError: If the channel does not exist or is private and
                the principal is not a member
        """
        channel = await self.channel_store.find_by_id(channel_id)
        if channel is None:
            raise NotFoundError("Channel", channel_id)

        await self.gate.ensure_visible(principal, channel)

        return await self.broker.leave(channel.id, principal.id)
