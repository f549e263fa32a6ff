"""
Unit tests for ShutdownManager.

Tests graceful shutdown coordination and state management.
"""

import asyncio

from salon.infrastructure.shutdown import ShutdownManager
from salon.infrastructure.shutdown.shutdown_manager import ShutdownState


class TestShutdownManager:
    """Unit tests for ShutdownManager."""

    # ================================================================
    # State management tests
    # ================================================================

    def test_initial_state(self):
        manager = ShutdownManager(shutdown_timeout=30, grace_period=5)

        assert manager.state == ShutdownState.RUNNING
        assert manager.is_shutting_down() is False
        assert manager.shutdown_started_at is None

    async def test_initiate_shutdown(self):
        manager = ShutdownManager()

        await manager.initiate_shutdown("test")

        assert manager.is_shutting_down()
        assert manager.shutdown_reason == "test"
        assert manager.shutdown_started_at is not None

    async def test_mark_complete(self):
        manager = ShutdownManager()
        await manager.initiate_shutdown()

        manager.mark_shutdown_complete()

        assert manager.state == ShutdownState.SHUTDOWN

    # ================================================================
    # Callback tests
    # ================================================================

    async def test_callbacks_run_in_order(self):
        manager = ShutdownManager()
        calls = []

        async def first():
            calls.append("first")

        def second():
            calls.append("second")

        manager.register_shutdown_callback(first)
        manager.register_shutdown_callback(second)
        await manager.initiate_shutdown()

        assert calls == ["first", "second"]

    async def test_failing_callback_does_not_stop_others(self):
        manager = ShutdownManager()
        calls = []

        def broken():
            raise RuntimeError("boom")

        manager.register_shutdown_callback(broken)
        manager.register_shutdown_callback(lambda: calls.append("ran"))
        await manager.initiate_shutdown()

        assert calls == ["ran"]

    async def test_second_initiate_is_ignored(self):
        manager = ShutdownManager()
        calls = []
        manager.register_shutdown_callback(lambda: calls.append(1))

        await manager.initiate_shutdown("first")
        await manager.initiate_shutdown("second")

        assert calls == [1]
        assert manager.shutdown_reason == "first"

    async def test_wait_for_shutdown(self):
        manager = ShutdownManager()
        waiter = asyncio.create_task(manager.wait_for_shutdown())
        await asyncio.sleep(0)
        assert not waiter.done()

        await manager.initiate_shutdown()
        await asyncio.wait_for(waiter, timeout=1)

    def test_shutdown_info(self):
        info = ShutdownManager(shutdown_timeout=12).get_shutdown_info()

        assert info["state"] == "running"
        assert info["is_shutting_down"] is False
        assert info["shutdown_timeout"] == 12
