"""
Salon - membership-gated real-time channel messaging.

Orchestrates Clean Architecture components to provide channel
management, durable message history and live fan-out over WebSocket.
"""

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from salon.config.settings import Settings, load_config
from salon.di import Container
from salon.infrastructure.monitoring import SystemReporter
from salon.presentation.api.dependencies import set_container
from salon.presentation.api.error_handlers import register_exception_handlers
from salon.presentation.api.routes import (
    broadcasting_router,
    channels_router,
    health_router,
    messages_router,
    stats_router,
    websocket_router,
)


class SalonApp:
    """
    Salon application orchestrator.

    Thin coordination layer that initializes and connects
    all Clean Architecture components.

    Responsibilities:
        - Initialize DI container
        - Setup FastAPI application
        - Register API routes and exception handlers
        - Manage application lifecycle with graceful shutdown
        - Run uvicorn server
    """

    def __init__(self, settings: Settings):
        """
        Initialize Salon application.

        Args:
            settings: Application settings
        """
        self.settings = settings

        # Initialize reporter FIRST
        self.reporter = SystemReporter.from_level_name(
            name="salon",
            level_name=settings.log_level,
            log_file=settings.log_file,
            verbose=settings.verbose,
        )

        self.container = Container(settings, reporter=self.reporter)

        self.app = self._create_app()

        # Set global container for FastAPI dependencies
        set_container(self.container)

        self.heartbeat_task: Optional[asyncio.Task] = None

        # Server instance (set during serve)
        self.server: Optional[uvicorn.Server] = None

        self.reporter.info(
            f"Salon initialized (env={settings.env})",
            context="Salon",
            verbose_level=1,
        )

    def _create_app(self) -> FastAPI:
        """
        Create FastAPI application with lifespan management.

        Returns:
            Configured FastAPI application
        """

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            """Application lifespan context manager with graceful shutdown."""
            await self._on_startup()

            yield

            await self._on_shutdown()

        app = FastAPI(
            title=self.settings.app_name,
            description="Membership-gated real-time channel messaging",
            version=self.settings.app_version,
            debug=self.settings.debug,
            lifespan=lifespan,
        )

        register_exception_handlers(app)

        app.include_router(channels_router)
        app.include_router(messages_router)
        app.include_router(broadcasting_router)
        app.include_router(websocket_router)
        app.include_router(health_router)
        app.include_router(stats_router)

        return app

    async def _on_startup(self):
        """
        Application startup event handler.

        Connects the database, installs signal handlers and starts the
        heartbeat.
        """
        self.reporter.info("Salon starting...", context="Salon", verbose_level=1)

        database = self.container.database
        await database.connect()
        if self.settings.auto_create_tables:
            await database.create_tables()
            self.reporter.info("Database tables ensured", context="Salon")

        shutdown_manager = self.container.shutdown_manager
        if shutdown_manager.setup_signal_handlers():
            self.reporter.info(
                f"Graceful shutdown enabled "
                f"(timeout: {self.settings.shutdown_timeout}s)",
                context="Salon",
                verbose_level=1,
            )
        shutdown_manager.register_shutdown_callback(self._graceful_shutdown_callback)

        self.reporter.info(
            f"Host: {self.settings.host}:{self.settings.port}",
            context="Salon",
            verbose_level=1,
        )

        self.heartbeat_task = asyncio.create_task(self._heartbeat_loop())

    async def _graceful_shutdown_callback(self):
        """
        Callback executed when shutdown is initiated.

        Notifies clients and asks the uvicorn server to stop.
        """
        self.reporter.warning(
            "Graceful shutdown initiated", context="Salon", verbose_level=1
        )

        self._notify_clients_shutdown()

        if self.server:
            self.server.should_exit = True

    async def _on_shutdown(self):
        """
        Application shutdown event handler.

        Cleanly shuts down connections, background tasks and the database.
        """
        self.reporter.info("Salon shutting down...", context="Salon", verbose_level=1)

        shutdown_manager = self.container.shutdown_manager
        await shutdown_manager.initiate_shutdown("lifespan")

        if self.heartbeat_task:
            self.heartbeat_task.cancel()
            try:
                await self.heartbeat_task
            except asyncio.CancelledError:
                pass

        await self._close_all_connections_gracefully()

        await self.container.database.disconnect()

        shutdown_manager.mark_shutdown_complete()
        shutdown_manager.restore_signal_handlers()

        self.reporter.info("Salon stopped", context="Salon", verbose_level=1)

    def _notify_clients_shutdown(self):
        """Queue a shutdown notice for every live connection."""
        conn_manager = self.container.connection_manager
        total = conn_manager.get_total_connections()

        if total == 0:
            return

        self.reporter.info(
            f"Notifying {total} clients of shutdown", context="Salon", verbose_level=1
        )

        shutdown_msg = {
            "type": "shutdown",
            "message": "Server is shutting down",
            "code": 1001,
        }
        for connection in list(conn_manager.connections.values()):
            connection.enqueue(shutdown_msg)

    async def _close_all_connections_gracefully(self):
        """
        Close all live connections.

        Waits up to the grace period for queued frames, the shutdown notice
        among them, to be written first.
        """
        conn_manager = self.container.connection_manager
        grace_period = self.settings.shutdown_grace_period
        connections = list(conn_manager.connections.values())

        if connections and grace_period > 0:
            self.reporter.info(
                f"Waiting up to {grace_period}s to flush {len(connections)} clients",
                context="Salon",
                verbose_level=1,
            )
            _, pending = await asyncio.wait(
                [asyncio.create_task(c.drain()) for c in connections],
                timeout=grace_period,
            )
            for task in pending:
                task.cancel()

        await conn_manager.close_all(code=1001, reason="Server shutdown")

    async def _heartbeat_loop(self):
        """
        Periodic heartbeat loop.

        Queues a ping for every live connection at the configured interval.
        Connections whose socket is dead fail on write and are dropped by
        their writer. Stops when shutdown is initiated.
        """
        interval = self.settings.heartbeat_interval
        shutdown_manager = self.container.shutdown_manager

        self.reporter.info(
            f"Heartbeat started (interval: {interval}s)",
            context="Salon",
            verbose_level=1,
        )

        while not shutdown_manager.is_shutting_down():
            try:
                await asyncio.wait_for(
                    shutdown_manager.wait_for_shutdown(), timeout=interval
                )
                break
            except asyncio.TimeoutError:
                pass

            conn_manager = self.container.connection_manager
            total = conn_manager.get_total_connections()
            if total == 0:
                continue

            self.reporter.debug(
                f"Heartbeat -> {total} clients", context="Salon", verbose_level=3
            )

            for connection in list(conn_manager.connections.values()):
                connection.enqueue({"type": "ping"})

        self.reporter.info("Heartbeat stopped (shutdown)", context="Salon")

    async def serve(self):
        """
        Run server with proper signal handling.

        Uses uvicorn.Server API for proper shutdown control.
        """
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level,
        )
        self.server = uvicorn.Server(config)
        await self.server.serve()

    def start(self):
        """
        Start Salon server.

        Blocks until server is stopped.
        """
        asyncio.run(self.serve())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application (used by tests and ASGI servers)."""
    return SalonApp(settings or load_config()).app


def main():
    """
    Main entry point for Salon application.

    Loads configuration and starts the server. An optional first argument
    overrides the port.
    """
    config = load_config()

    if len(sys.argv) > 1:
        try:
            config.port = int(sys.argv[1])
        except ValueError:
            print(f"Invalid port: {sys.argv[1]}")
            sys.exit(1)

    app = SalonApp(config)

    try:
        app.start()
    except KeyboardInterrupt:
        print("\nSalon stopped by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
