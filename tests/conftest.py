"""
Test fixtures and configuration.
"""

import asyncio
import logging
from typing import Any, AsyncGenerator, List, Optional, Tuple

import pytest
import pytest_asyncio

from salon.config.settings import Settings
from salon.domain.entities.principal import Principal
from salon.infrastructure.monitoring.system_reporter import SystemReporter
from salon.infrastructure.persistence import (
    Database,
    SQLChannelStore,
    SQLMessageStore,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret"


class FakeTransport:
    """
    In-memory stand-in for a WebSocket.

    Records every frame written. ``fail`` makes writes raise, ``delay``
    makes them slow.
    """

    def __init__(self, fail: bool = False, delay: float = 0.0):
        self.sent: List[Any] = []
        self.closed_with: Optional[Tuple[int, Optional[str]]] = None
        self.fail = fail
        self.delay = delay

    async def send_json(self, data: Any) -> None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ConnectionError("socket gone")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: Optional[str] = None) -> None:
        self.closed_with = (code, reason)

    def types(self) -> List[str]:
        return [frame["type"] for frame in self.sent]

    def of_type(self, frame_type: str) -> List[Any]:
        return [frame for frame in self.sent if frame["type"] == frame_type]


@pytest.fixture
def settings() -> Settings:
    """Settings for an isolated in-memory instance."""
    return Settings(
        env="test",
        database_url=TEST_DATABASE_URL,
        jwt_secret=TEST_JWT_SECRET,
        auto_create_tables=True,
        shutdown_grace_period=0,
        log_level="warning",
        verbose=0,
    )


@pytest.fixture
def reporter() -> SystemReporter:
    return SystemReporter(name="salon-test", level=logging.WARNING, verbose=0)


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    """
    Create test database and tables.

    Each test gets a clean in-memory database.
    """
    db = Database(database_url=TEST_DATABASE_URL, echo=False)
    await db.connect()
    await db.create_tables()

    yield db

    await db.disconnect()


@pytest.fixture
def channel_store(database: Database, reporter: SystemReporter) -> SQLChannelStore:
    return SQLChannelStore(database, reporter=reporter)


@pytest.fixture
def message_store(database: Database, reporter: SystemReporter) -> SQLMessageStore:
    return SQLMessageStore(database, reporter=reporter)


@pytest.fixture
def alice() -> Principal:
    return Principal(id="alice", display_name="Alice")


@pytest.fixture
def bob() -> Principal:
    return Principal(id="bob", display_name="Bob")


@pytest.fixture
def carol() -> Principal:
    return Principal(id="carol", display_name="Carol")


@pytest.fixture
def transport_factory():
    """Factory for FakeTransport instances."""
    return FakeTransport
