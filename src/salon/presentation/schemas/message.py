"""
Schemas for message endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from salon.domain.entities.message import Message
from salon.domain.events import MemberInfo
from salon.domain.timestamps import to_iso_z
from salon.domain.value_objects.page import Page


class SendMessageRequest(BaseModel):
    """Request body for sending a message."""

    content: str = Field(..., description="Message text")


class MessageResponse(BaseModel):
    """Message representation (same fields as the live event)."""

    id: int
    channel_id: int
    position: int
    content: str
    created_at: datetime
    sender: MemberInfo
    is_read: bool = False
    read_at: Optional[datetime] = None

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso_z(value)

    @field_serializer("read_at")
    def serialize_read_at(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso_z(value) if value else None

    @classmethod
    def from_entity(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            channel_id=message.channel_id,
            position=message.position,
            content=message.content,
            created_at=message.created_at,
            sender=MemberInfo(id=message.sender_id, display_name=message.sender_name),
            is_read=message.is_read(),
            read_at=message.read_at,
        )


class MessagePageResponse(BaseModel):
    """Page of messages, oldest first."""

    items: List[MessageResponse]
    page: int
    page_size: int
    total: int
    last_page: int
    has_more: bool

    @classmethod
    def from_page(cls, page: Page[Message]) -> "MessagePageResponse":
        return cls(
            items=[MessageResponse.from_entity(m) for m in page.items],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            last_page=page.last_page,
            has_more=page.has_more,
        )
