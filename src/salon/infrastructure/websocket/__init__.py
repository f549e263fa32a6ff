"""
WebSocket infrastructure for Salon.
"""

from salon.infrastructure.websocket.connection_manager import (
    ConnectionLimitExceeded,
    ConnectionManager,
)
from salon.infrastructure.websocket.live_connection import (
    LiveConnection,
    generate_connection_id,
)

__all__ = [
    "ConnectionManager",
    "ConnectionLimitExceeded",
    "LiveConnection",
    "generate_connection_id",
]
