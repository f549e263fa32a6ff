"""
Live connection - one transport with its own outbound queue.
"""

import asyncio
import time
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Set

from salon.domain.entities.principal import Principal
from salon.infrastructure.monitoring.system_reporter import SystemReporter


class Transport(Protocol):
    """Minimal socket surface a connection writes to (FastAPI WebSocket)."""

    async def send_json(self, data: Any) -> None: ...

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None: ...


def generate_connection_id() -> str:
    """Generate unique connection ID for tracking."""
    return f"conn_{uuid.uuid4().hex[:12]}"


class LiveConnection:
    """
    Live connection of one principal.

    Frames are queued and written by a dedicated writer task, so a slow
    socket never blocks the code that publishes to it. A full queue drops
    the frame for this connection only. A write that fails or times out
    marks the connection broken and hands it to ``on_broken``.

    Attributes:
        id: Connection ID (the socket id clients pass as X-Socket-ID)
        principal: Authenticated principal owning the connection
        topics: Topic names this connection is subscribed to
        frames_sent: Frames written to the transport
        frames_dropped: Frames discarded because the queue was full
    """

    def __init__(
        self,
        transport: Transport,
        principal: Principal,
        queue_size: int = 256,
        send_timeout: float = 5.0,
        reporter: Optional[SystemReporter] = None,
        connection_id: Optional[str] = None,
    ):
        self.id = connection_id or generate_connection_id()
        self.transport = transport
        self.principal = principal
        self.send_timeout = send_timeout
        self.reporter = reporter
        self.topics: Set[str] = set()
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=max(1, queue_size))
        self.on_broken: Optional[Callable[["LiveConnection"], Awaitable[None]]] = None
        self.frames_sent = 0
        self.frames_dropped = 0
        self.connected_at = time.time()
        self._writer: Optional[asyncio.Task] = None
        self._closed = False
        self._broken = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def broken(self) -> bool:
        return self._broken

    def start(self) -> None:
        """Start the writer task."""
        if self._writer is None and not self._closed:
            self._writer = asyncio.create_task(
                self._write_loop(), name=f"writer-{self.id}"
            )

    def enqueue(self, frame: Dict[str, Any]) -> bool:
        """
        Queue a frame without waiting.

        Returns:
            True if queued, False if dropped (closed or queue full)
        """
        if self._closed or self._broken:
            return False

        try:
            self.queue.put_nowait(frame)
            return True
        except asyncio.QueueFull:
            self.frames_dropped += 1
            if self.reporter:
                self.reporter.warning(
                    f"Outbound queue full, frame dropped "
                    f"[conn={self.id}] [user={self.principal.id}] "
                    f"[type={frame.get('type')}] [dropped={self.frames_dropped}]",
                    context="LiveConnection",
                )
            return False

    async def send(self, frame: Dict[str, Any]) -> None:
        """Queue a direct reply, waiting for room in the queue."""
        if self._closed or self._broken:
            return
        await self.queue.put(frame)

    async def drain(self) -> None:
        """Wait until every queued frame has been written."""
        if self._writer is None or self._writer.done():
            return
        await self.queue.join()

    async def _write_loop(self) -> None:
        while True:
            frame = await self.queue.get()
            try:
                await asyncio.wait_for(
                    self.transport.send_json(frame), timeout=self.send_timeout
                )
                self.frames_sent += 1
            except Exception as e:
                self._broken = True
                if self.reporter:
                    self.reporter.warning(
                        f"Delivery failed, dropping connection "
                        f"[conn={self.id}] [user={self.principal.id}]: "
                        f"{type(e).__name__}: {e}",
                        context="LiveConnection",
                    )
                break
            finally:
                self.queue.task_done()

        self._discard_pending()
        await self._close_transport(1011, "Delivery failed")

        if self.on_broken:
            await self.on_broken(self)

    def _discard_pending(self) -> None:
        while not self.queue.empty():
            self.queue.get_nowait()
            self.queue.task_done()

    async def stop(self) -> None:
        """Stop the writer and discard pending frames. Idempotent."""
        if self._closed:
            return
        self._closed = True

        writer = self._writer
        if writer and not writer.done() and writer is not asyncio.current_task():
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass

        self._discard_pending()

    async def close(self, code: int = 1000, reason: str = "") -> None:
        """Stop the writer and close the transport."""
        await self.stop()
        await self._close_transport(code, reason)

    async def _close_transport(self, code: int, reason: str) -> None:
        try:
            await self.transport.close(code=code, reason=reason)
        except Exception as e:
            # Transport already gone (client disconnected first).
            if self.reporter:
                self.reporter.debug(
                    f"Transport close ignored [conn={self.id}]: {e}",
                    context="LiveConnection",
                )

    def __repr__(self) -> str:
        return (
            f"LiveConnection(id={self.id}, user={self.principal.id}, "
            f"topics={sorted(self.topics)})"
        )
