"""
API routes for Salon.
"""

from salon.presentation.api.routes.broadcasting import router as broadcasting_router
from salon.presentation.api.routes.channels import router as channels_router
from salon.presentation.api.routes.health import router as health_router
from salon.presentation.api.routes.messages import router as messages_router
from salon.presentation.api.routes.stats import router as stats_router
from salon.presentation.api.routes.websocket import router as websocket_router

__all__ = [
    "broadcasting_router",
    "channels_router",
    "health_router",
    "messages_router",
    "stats_router",
    "websocket_router",
]
