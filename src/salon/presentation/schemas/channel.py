"""
Schemas for channel endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer

from salon.domain.entities.channel import Channel
from salon.domain.timestamps import to_iso_z
from salon.domain.value_objects.page import Page


class CreateChannelRequest(BaseModel):
    """Request body for creating a channel."""

    name: str = Field(..., description="Unique channel name")
    description: Optional[str] = Field(None, description="Optional description")
    type: str = Field(
        default="public", description="Visibility: 'public' or 'private'"
    )


class ChannelResponse(BaseModel):
    """Channel representation."""

    id: int = Field(..., description="Channel ID")
    name: str = Field(..., description="Channel name")
    slug: str = Field(..., description="Channel slug")
    description: Optional[str] = Field(None, description="Description")
    type: str = Field(..., description="Visibility")
    created_by: str = Field(..., description="Creator principal ID")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    member_count: int = Field(..., description="Number of members")
    topic: str = Field(..., description="Live topic to subscribe to")

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso_z(value)

    @classmethod
    def from_entity(cls, channel: Channel) -> "ChannelResponse":
        return cls(
            id=channel.id,
            name=channel.name,
            slug=channel.slug,
            description=channel.description,
            type=channel.visibility.value,
            created_by=channel.created_by,
            created_at=channel.created_at,
            member_count=channel.member_count,
            topic=str(channel.topic),
        )


class ChannelPageResponse(BaseModel):
    """Page of channels."""

    items: List[ChannelResponse]
    page: int
    page_size: int
    total: int
    last_page: int
    has_more: bool

    @classmethod
    def from_page(cls, page: Page[Channel]) -> "ChannelPageResponse":
        return cls(
            items=[ChannelResponse.from_entity(c) for c in page.items],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            last_page=page.last_page,
            has_more=page.has_more,
        )


class LeaveChannelResponse(BaseModel):
    """Result of leaving a channel."""

    channel_id: int
    left: bool = Field(..., description="False if the principal was not a member")
