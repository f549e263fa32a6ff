"""
Application DTOs for Salon.
"""

from salon.application.dto.websocket_dto import (
    ClientFrame,
    PingFrame,
    SendFrame,
    SubscribeFrame,
    UnsubscribeFrame,
    parse_client_frame,
)

__all__ = [
    "ClientFrame",
    "PingFrame",
    "SendFrame",
    "SubscribeFrame",
    "UnsubscribeFrame",
    "parse_client_frame",
]
