"""
Message event schemas.

Events published by the broker once a message is durably stored.
"""

from typing import Literal

from pydantic import Field

from salon.domain.entities.message import Message
from salon.domain.events.base import BaseEvent, MemberInfo
from salon.domain.timestamps import to_iso_z


class MessageSentEvent(BaseEvent):
    """Event for message.sent - a new message in a channel."""

    type: Literal["message.sent"] = "message.sent"
    id: int = Field(..., description="Message ID")
    position: int = Field(..., description="Position within the channel")
    content: str = Field(..., description="Message text")
    created_at: str = Field(..., description="ISO 8601 UTC timestamp")
    sender: MemberInfo = Field(..., description="Sender")

    @classmethod
    def from_message(cls, message: Message) -> "MessageSentEvent":
        """Build the event from the persisted message, field for field."""
        return cls(
            channel_id=message.channel_id,
            id=message.id,
            position=message.position,
            content=message.content,
            created_at=to_iso_z(message.created_at),
            sender=MemberInfo(id=message.sender_id, display_name=message.sender_name),
        )
