"""
Graceful shutdown manager.

Handles:
- Signal registration (SIGTERM, SIGINT)
- Shutdown state tracking
- Shutdown callbacks (client notification, connection close)
"""

import asyncio
import signal
import threading
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

from salon.domain.timestamps import utc_now
from salon.infrastructure.monitoring.system_reporter import SystemReporter


class ShutdownState(Enum):
    """Shutdown state enum."""

    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    SHUTDOWN = "shutdown"


class ShutdownManager:
    """
    Manages graceful shutdown of the Salon service.

    Coordinates shutdown sequence:
    1. Catch shutdown signals
    2. Set shutdown flag (new WebSocket connections are refused)
    3. Run callbacks in registration order
    4. Mark shutdown complete

    Attributes:
        state: Current shutdown state
        shutdown_timeout: Max seconds to wait for shutdown
        grace_period: Seconds to wait for WebSocket close
        shutdown_started_at: Timestamp when shutdown initiated
    """

    def __init__(
        self,
        shutdown_timeout: int = 30,
        grace_period: int = 5,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize shutdown manager.

        Args:
            shutdown_timeout: Maximum seconds to wait for complete shutdown
            grace_period: Seconds to wait for graceful WebSocket closure
            reporter: Optional SystemReporter for logging
        """
        self.shutdown_timeout = shutdown_timeout
        self.grace_period = grace_period
        self.reporter = reporter

        self.state = ShutdownState.RUNNING
        self.shutdown_started_at: Optional[datetime] = None
        self.shutdown_reason: Optional[str] = None
        self._shutdown_event = asyncio.Event()
        self._shutdown_callbacks: List[Callable] = []
        self._signal_task: Optional[asyncio.Task] = None
        self._installed_signals: List[signal.Signals] = []

    def is_shutting_down(self) -> bool:
        """Check if shutdown is in progress or done."""
        return self.state in (ShutdownState.SHUTTING_DOWN, ShutdownState.SHUTDOWN)

    def register_shutdown_callback(self, callback: Callable) -> None:
        """
        Register callback to be called on shutdown.

        Callbacks are called in registration order.

        Args:
            callback: Sync or async callable without arguments
        """
        self._shutdown_callbacks.append(callback)

    def setup_signal_handlers(self) -> bool:
        """
        Install SIGTERM/SIGINT handlers on the running loop.

        Only possible from the main thread; elsewhere (test clients running
        the app in a worker thread) nothing is installed.

        Returns:
            True if handlers were installed
        """
        if threading.current_thread() is not threading.main_thread():
            return False

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._handle_signal, sig)
                self._installed_signals.append(sig)
            except (NotImplementedError, RuntimeError):
                # Platform without loop signal support (Windows)
                return False
        return True

    def restore_signal_handlers(self) -> None:
        """Remove handlers installed by setup_signal_handlers."""
        if not self._installed_signals:
            return

        loop = asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()

    def _handle_signal(self, sig: signal.Signals) -> None:
        if self.reporter:
            self.reporter.warning(
                f"Received {sig.name}, shutting down", context="ShutdownManager"
            )
        self._signal_task = asyncio.create_task(self.initiate_shutdown(sig.name))

    async def initiate_shutdown(self, reason: str = "manual") -> None:
        """
        Initiate graceful shutdown sequence.

        Args:
            reason: Reason for shutdown (signal name, lifespan, manual)
        """
        if self.state != ShutdownState.RUNNING:
            return

        self.state = ShutdownState.SHUTTING_DOWN
        self.shutdown_started_at = utc_now()
        self.shutdown_reason = reason
        self._shutdown_event.set()

        for callback in self._shutdown_callbacks:
            try:
                if asyncio.iscoroutinefunction(callback):
                    await callback()
                else:
                    callback()
            except Exception as e:
                # Continue shutdown even if a callback fails
                if self.reporter:
                    self.reporter.error(
                        f"Shutdown callback {getattr(callback, '__name__', callback)} "
                        f"failed: {type(e).__name__}: {e}",
                        context="ShutdownManager",
                    )

    async def wait_for_shutdown(self) -> None:
        """Block until shutdown is initiated."""
        await self._shutdown_event.wait()

    def mark_shutdown_complete(self) -> None:
        """Mark shutdown as complete."""
        self.state = ShutdownState.SHUTDOWN

    def get_shutdown_info(self) -> dict:
        """Get shutdown status information."""
        return {
            "state": self.state.value,
            "is_shutting_down": self.is_shutting_down(),
            "reason": self.shutdown_reason,
            "shutdown_started_at": (
                self.shutdown_started_at.isoformat()
                if self.shutdown_started_at
                else None
            ),
            "shutdown_timeout": self.shutdown_timeout,
            "grace_period": self.grace_period,
        }
