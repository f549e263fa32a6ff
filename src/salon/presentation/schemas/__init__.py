"""
Presentation schemas for Salon.
"""

from salon.presentation.schemas.broadcasting import (
    BroadcastAuthRequest,
    BroadcastAuthResponse,
)
from salon.presentation.schemas.channel import (
    ChannelPageResponse,
    ChannelResponse,
    CreateChannelRequest,
    LeaveChannelResponse,
)
from salon.presentation.schemas.health import StatsResponse
from salon.presentation.schemas.message import (
    MessagePageResponse,
    MessageResponse,
    SendMessageRequest,
)

__all__ = [
    "BroadcastAuthRequest",
    "BroadcastAuthResponse",
    "ChannelPageResponse",
    "ChannelResponse",
    "CreateChannelRequest",
    "LeaveChannelResponse",
    "MessagePageResponse",
    "MessageResponse",
    "SendMessageRequest",
    "StatsResponse",
]
