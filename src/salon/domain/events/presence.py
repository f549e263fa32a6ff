"""
Presence event schemas.

Presence events tell subscribers who else is watching a channel. They are
typed apart from message events and carry no ordering guarantee.
"""

from typing import List, Literal, Union

from pydantic import Field

from salon.domain.entities.principal import Principal
from salon.domain.events.base import BaseEvent, MemberInfo


def member_info(principal: Principal) -> MemberInfo:
    """Presence descriptor of a principal."""
    return MemberInfo(id=principal.id, display_name=principal.display_name)


class PresenceHereEvent(BaseEvent):
    """Event for presence.here - snapshot sent to a new subscriber."""

    type: Literal["presence.here"] = "presence.here"
    members: List[MemberInfo] = Field(
        default_factory=list, description="Principals currently subscribed"
    )


class PresenceJoiningEvent(BaseEvent):
    """Event for presence.joining - a principal started watching."""

    type: Literal["presence.joining"] = "presence.joining"
    member: MemberInfo = Field(..., description="Principal that joined")


class PresenceLeavingEvent(BaseEvent):
    """Event for presence.leaving - a principal stopped watching."""

    type: Literal["presence.leaving"] = "presence.leaving"
    member: MemberInfo = Field(..., description="Principal that left")


PresenceEvent = Union[PresenceHereEvent, PresenceJoiningEvent, PresenceLeavingEvent]
