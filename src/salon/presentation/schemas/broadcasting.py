"""
Schemas for the subscribe authorization callback.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field

from salon.domain.events import MemberInfo


class BroadcastAuthRequest(BaseModel):
    """Subscription a transport wants to admit."""

    channel_name: str = Field(
        ...,
        validation_alias=AliasChoices("channel_name", "topic"),
        description="Topic name, e.g. 'channel.42' or 'presence-channel.42'",
    )
    socket_id: Optional[str] = Field(None, description="Transport socket ID")


class BroadcastAuthResponse(BaseModel):
    """Admission with the presence descriptor to share."""

    channel_name: str
    socket_id: Optional[str] = None
    channel_data: MemberInfo
