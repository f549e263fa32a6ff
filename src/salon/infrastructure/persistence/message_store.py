"""
Message store implementation.

Append-only. Positions are assigned under a per-channel lock and backed by
the (channel_id, position) unique constraint for writers in other
processes.
"""

import asyncio
from typing import Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from salon.domain.entities.message import Message
from salon.domain.exceptions import ValidationError
from salon.domain.repositories.i_message_store import IMessageStore
from salon.domain.timestamps import as_utc, utc_now
from salon.domain.value_objects.page import Page
from salon.infrastructure.monitoring.system_reporter import SystemReporter
from salon.infrastructure.persistence.database import Database
from salon.infrastructure.persistence.models import MessageModel

MAX_APPEND_ATTEMPTS = 5


class SQLMessageStore(IMessageStore):
    """SQLAlchemy implementation of the message store."""

    def __init__(
        self,
        database: Database,
        max_content_length: int = 2000,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize store.

        Args:
            database: Connected database
            max_content_length: Maximum message length after trim
            reporter: Optional SystemReporter for logging
        """
        self.database = database
        self.max_content_length = max_content_length
        self.reporter = reporter
        self._locks: Dict[int, asyncio.Lock] = {}

    def lock_for(self, channel_id: int) -> asyncio.Lock:
        """Per-channel append lock."""
        return self._locks.setdefault(channel_id, asyncio.Lock())

    def _validate(self, content: str) -> str:
        content = (content or "").strip()

        if not content:
            raise ValidationError("content", "The content field is required.")

        if len(content) > self.max_content_length:
            raise ValidationError(
                "content",
                f"The content may not be greater than "
                f"{self.max_content_length} characters.",
            )

        return content

    async def append(
        self,
        channel_id: int,
        sender_id: str,
        sender_name: str,
        content: str,
    ) -> Message:
        content = self._validate(content)

        async with self.lock_for(channel_id):
            for attempt in range(1, MAX_APPEND_ATTEMPTS + 1):
                try:
                    return await self._insert_next(
                        channel_id, sender_id, sender_name, content
                    )
                except IntegrityError:
                    if attempt == MAX_APPEND_ATTEMPTS:
                        raise
                    if self.reporter:
                        self.reporter.warning(
                            f"Position collision on channel {channel_id}, "
                            f"retrying ({attempt}/{MAX_APPEND_ATTEMPTS})",
                            context="MessageStore",
                        )

        raise RuntimeError("unreachable")

    async def _insert_next(
        self,
        channel_id: int,
        sender_id: str,
        sender_name: str,
        content: str,
    ) -> Message:
        async with self.database.session() as session:
            last = await session.scalar(
                select(func.coalesce(func.max(MessageModel.position), 0)).where(
                    MessageModel.channel_id == channel_id
                )
            )

            model = MessageModel(
                channel_id=channel_id,
                position=(last or 0) + 1,
                sender_id=sender_id,
                sender_name=sender_name,
                content=content,
                created_at=utc_now(),
            )
            session.add(model)
            await session.flush()

            return self._to_entity(model)

    async def page_for_channel(
        self, channel_id: int, page: int, page_size: int
    ) -> Page[Message]:
        offset = Page.offset_for(page, page_size)
        condition = MessageModel.channel_id == channel_id

        async with self.database.session() as session:
            total = await session.scalar(
                select(func.count()).select_from(MessageModel).where(condition)
            )
            models = (
                await session.scalars(
                    select(MessageModel)
                    .where(condition)
                    .order_by(MessageModel.position.asc(), MessageModel.id.asc())
                    .offset(offset)
                    .limit(page_size)
                )
            ).all()

        return Page(
            items=[self._to_entity(model) for model in models],
            page=page,
            page_size=page_size,
            total=total or 0,
        )

    async def find_by_id(self, message_id: int) -> Optional[Message]:
        async with self.database.session() as session:
            model = await session.get(MessageModel, message_id)
            return self._to_entity(model) if model else None

    @staticmethod
    def _to_entity(model: MessageModel) -> Message:
        return Message(
            id=model.id,
            channel_id=model.channel_id,
            position=model.position,
            sender_id=model.sender_id,
            sender_name=model.sender_name,
            content=model.content,
            created_at=as_utc(model.created_at),
            read_at=as_utc(model.read_at) if model.read_at else None,
        )
