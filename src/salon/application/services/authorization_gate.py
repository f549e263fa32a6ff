"""
Authorization gate - decides what a principal may do with a channel.
"""

from salon.domain.entities.channel import Channel
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import AuthorizationError, NotFoundError
from salon.domain.repositories.i_channel_store import IChannelStore


class AuthorizationGate:
    """
    Side-effect-free permission checks over the channel store.

    Membership is the only basis for reading and writing. Joining on
    one's own is open for public channels only. Denial messages are
    generic and never describe who the members are.
    """

    READ_DENIED = "You must be a member of this channel to read its messages."
    WRITE_DENIED = "You must be a member of this channel to send messages."
    JOIN_DENIED = "Cannot join a private channel without an invitation."

    def __init__(self, channel_store: IChannelStore):
        self.channel_store = channel_store

    async def can_read(self, principal: Principal, channel: Channel) -> bool:
        return await self.channel_store.is_member(channel.id, principal.id)

    async def can_write(self, principal: Principal, channel: Channel) -> bool:
        return await self.can_read(principal, channel)

    async def can_join(self, principal: Principal, channel: Channel) -> bool:
        return channel.is_public()

    async def ensure_can_read(self, principal: Principal, channel: Channel) -> None:
        if not await self.can_read(principal, channel):
            raise AuthorizationError(
                self.READ_DENIED, principal_id=principal.id, resource=str(channel.topic)
            )

    async def ensure_can_write(self, principal: Principal, channel: Channel) -> None:
        if not await self.can_write(principal, channel):
            raise AuthorizationError(
                self.WRITE_DENIED, principal_id=principal.id, resource=str(channel.topic)
            )

    async def ensure_can_join(self, principal: Principal, channel: Channel) -> None:
        if not await self.can_join(principal, channel):
            raise AuthorizationError(
                self.JOIN_DENIED, principal_id=principal.id, resource=str(channel.topic)
            )

    async def ensure_visible(self, principal: Principal, channel: Channel) -> None:
        """
        Hide private channels from non-members.

        Raises:
            NotFoundError: If the channel is private and the principal is
                not a member
        """
        if channel.is_private() and not await self.can_read(principal, channel):
            raise NotFoundError("Channel", channel.id)
