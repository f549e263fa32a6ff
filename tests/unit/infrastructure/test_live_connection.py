"""
Unit tests for LiveConnection.
"""

import asyncio

import pytest

from salon.domain.entities.principal import Principal
from salon.infrastructure.websocket import LiveConnection, generate_connection_id

ALICE = Principal(id="alice", display_name="Alice")


class TestLiveConnection:
    """Unit tests for the queued writer."""

    # ================================================================
    # Delivery
    # ================================================================

    async def test_frames_written_in_order(self, transport_factory):
        transport = transport_factory()
        connection = LiveConnection(transport, ALICE)
        connection.start()

        for i in range(3):
            assert connection.enqueue({"type": "n", "i": i})
        await connection.drain()

        assert [f["i"] for f in transport.sent] == [0, 1, 2]
        assert connection.frames_sent == 3
        await connection.stop()

    async def test_send_waits_for_room(self, transport_factory):
        transport = transport_factory()
        connection = LiveConnection(transport, ALICE, queue_size=1)
        connection.start()

        await connection.send({"type": "a"})
        await connection.send({"type": "b"})
        await connection.drain()

        assert transport.types() == ["a", "b"]
        await connection.stop()

    # ================================================================
    # Back-pressure and failures
    # ================================================================

    async def test_full_queue_drops_frame(self, transport_factory):
        """Test a slow socket loses frames instead of blocking the caller."""
        transport = transport_factory(delay=0.2)
        connection = LiveConnection(transport, ALICE, queue_size=1)
        connection.start()

        results = [connection.enqueue({"type": "f", "i": i}) for i in range(3)]

        assert results == [True, False, False]
        await asyncio.sleep(0)
        assert connection.enqueue({"type": "f", "i": 3})
        assert connection.frames_dropped == 2
        await connection.stop()

    async def test_failed_write_marks_broken(self, transport_factory):
        transport = transport_factory(fail=True)
        connection = LiveConnection(transport, ALICE)
        broken = []

        async def on_broken(conn):
            broken.append(conn)

        connection.on_broken = on_broken
        connection.start()
        connection.enqueue({"type": "ping"})
        await asyncio.sleep(0.05)

        assert connection.broken
        assert broken == [connection]
        assert transport.closed_with[0] == 1011
        assert not connection.enqueue({"type": "ping"})

    async def test_slow_write_times_out(self, transport_factory):
        transport = transport_factory(delay=1.0)
        connection = LiveConnection(transport, ALICE, send_timeout=0.05)
        connection.start()

        connection.enqueue({"type": "ping"})
        await asyncio.sleep(0.2)

        assert connection.broken

    # ================================================================
    # Lifecycle
    # ================================================================

    async def test_stop_is_idempotent(self, transport_factory):
        connection = LiveConnection(transport_factory(), ALICE)
        connection.start()

        await connection.stop()
        await connection.stop()

        assert connection.closed
        assert not connection.enqueue({"type": "ping"})

    async def test_close_closes_transport(self, transport_factory):
        transport = transport_factory()
        connection = LiveConnection(transport, ALICE)
        connection.start()

        await connection.close(code=1001, reason="bye")

        assert transport.closed_with == (1001, "bye")

    def test_generated_ids_are_unique(self):
        ids = {generate_connection_id() for _ in range(100)}

        assert len(ids) == 100
        assert all(i.startswith("conn_") for i in ids)

    @pytest.mark.parametrize("queue_size", [0, -5])
    async def test_queue_size_at_least_one(self, transport_factory, queue_size):
        connection = LiveConnection(transport_factory(), ALICE, queue_size=queue_size)

        assert connection.queue.maxsize == 1
