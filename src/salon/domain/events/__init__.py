"""
Live event schemas for Salon.
"""

from salon.domain.events.base import BaseEvent, MemberInfo
from salon.domain.events.message import MessageSentEvent
from salon.domain.events.presence import (
    PresenceEvent,
    PresenceHereEvent,
    PresenceJoiningEvent,
    PresenceLeavingEvent,
    member_info,
)

__all__ = [
    "BaseEvent",
    "MemberInfo",
    "MessageSentEvent",
    "PresenceEvent",
    "PresenceHereEvent",
    "PresenceJoiningEvent",
    "PresenceLeavingEvent",
    "member_info",
]
