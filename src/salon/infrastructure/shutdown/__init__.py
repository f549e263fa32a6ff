"""
Graceful shutdown infrastructure for Salon.
"""

from salon.infrastructure.shutdown.shutdown_manager import (
    ShutdownManager,
    ShutdownState,
)

__all__ = ["ShutdownManager", "ShutdownState"]
