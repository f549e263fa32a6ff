"""
Base event schema for live frames pushed to subscribers.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class MemberInfo(BaseModel):
    """Public descriptor of a principal (presence and sender info)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., description="Principal ID")
    display_name: str = Field(..., description="Display name")


class BaseEvent(BaseModel):
    """
    Base event that all live events inherit from.

    Events are immutable once built; the frame a subscriber receives is
    exactly ``to_frame()`` of the event.

    Attributes:
        type: Event type identifier (e.g., 'message.sent')
        channel_id: Channel the event belongs to
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str = Field(..., description="Event type identifier")
    channel_id: int = Field(..., description="Channel ID")

    def to_frame(self) -> Dict[str, Any]:
        """JSON-ready payload sent over the wire."""
        return self.model_dump(mode="json")
