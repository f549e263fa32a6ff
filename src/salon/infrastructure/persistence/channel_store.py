"""
Channel store implementation.
"""

from typing import List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import aliased

from salon.domain.entities.channel import Channel, Visibility
from salon.domain.entities.membership import Membership
from salon.domain.exceptions import FieldError, NotFoundError, ValidationError
from salon.domain.repositories.i_channel_store import IChannelStore
from salon.domain.timestamps import as_utc, utc_now
from salon.domain.value_objects.channel_slug import ChannelSlug
from salon.domain.value_objects.page import Page
from salon.infrastructure.monitoring.system_reporter import SystemReporter
from salon.infrastructure.persistence.database import Database
from salon.infrastructure.persistence.models import ChannelMemberModel, ChannelModel


class SQLChannelStore(IChannelStore):
    """SQLAlchemy implementation of the channel store."""

    def __init__(
        self,
        database: Database,
        max_name_length: int = 100,
        max_description_length: int = 500,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize store.

        Args:
            database: Connected database
            max_name_length: Maximum channel name length after trim
            max_description_length: Maximum description length
            reporter: Optional SystemReporter for logging
        """
        self.database = database
        self.max_name_length = max_name_length
        self.max_description_length = max_description_length
        self.reporter = reporter

    def _validate(
        self, name: str, description: Optional[str]
    ) -> tuple[str, Optional[str], Optional[ChannelSlug]]:
        errors: List[FieldError] = []
        name = (name or "").strip()
        slug = None

        if not name:
            errors.append(FieldError("name", "The name field is required."))
        elif len(name) > self.max_name_length:
            errors.append(
                FieldError(
                    "name",
                    f"The name may not be greater than "
                    f"{self.max_name_length} characters.",
                )
            )
        else:
            try:
                slug = ChannelSlug.from_name(name)
            except ValueError as e:
                errors.append(FieldError("name", str(e)))

        if description is not None:
            description = description.strip() or None
        if description and len(description) > self.max_description_length:
            errors.append(
                FieldError(
                    "description",
                    f"The description may not be greater than "
                    f"{self.max_description_length} characters.",
                )
            )

        if errors:
            raise ValidationError.from_errors(errors)

        return name, description, slug

    async def create(
        self,
        name: str,
        visibility: Visibility,
        creator_id: str,
        description: Optional[str] = None,
    ) -> Channel:
        name, description, slug = self._validate(name, description)
        visibility = Visibility(visibility)
        now = utc_now()

        try:
            async with self.database.session() as session:
                taken = await session.scalar(
                    select(ChannelModel.id)
                    .where(
                        or_(
                            ChannelModel.name == name,
                            ChannelModel.slug == slug.value,
                        )
                    )
                    .limit(1)
                )
                if taken is not None:
                    raise ValidationError("name", "The name has already been taken.")

                model = ChannelModel(
                    name=name,
                    slug=slug.value,
                    description=description,
                    visibility=visibility.value,
                    created_by=creator_id,
                    created_at=now,
                )
                session.add(model)
                await session.flush()

                session.add(
                    ChannelMemberModel(
                        channel_id=model.id,
                        principal_id=creator_id,
                        joined_at=now,
                    )
                )
                await session.flush()

                channel = self._to_entity(model, member_count=1)
        except IntegrityError as e:
            # Lost a race against a concurrent create of the same name.
            raise ValidationError("name", "The name has already been taken.") from e

        if self.reporter:
            self.reporter.info(
                f"Channel created: {channel.slug} (id={channel.id}, "
                f"{channel.visibility.value}) by {creator_id}",
                context="ChannelStore",
                verbose_level=2,
            )

        return channel

    async def find_by_id(self, channel_id: int) -> Optional[Channel]:
        stmt = select(ChannelModel, self._member_count()).where(
            ChannelModel.id == channel_id
        )
        async with self.database.session() as session:
            row = (await session.execute(stmt)).first()

        return self._to_entity(row[0], row[1]) if row else None

    async def find_by_slug(self, slug: str) -> Optional[Channel]:
        stmt = select(ChannelModel, self._member_count()).where(
            ChannelModel.slug == slug
        )
        async with self.database.session() as session:
            row = (await session.execute(stmt)).first()

        return self._to_entity(row[0], row[1]) if row else None

    async def list_public(self, page: int, page_size: int) -> Page[Channel]:
        offset = Page.offset_for(page, page_size)
        condition = ChannelModel.visibility == Visibility.PUBLIC.value

        async with self.database.session() as session:
            total = await session.scalar(
                select(func.count()).select_from(ChannelModel).where(condition)
            )
            rows = (
                await session.execute(
                    select(ChannelModel, self._member_count())
                    .where(condition)
                    .order_by(ChannelModel.created_at.desc(), ChannelModel.id.desc())
                    .offset(offset)
                    .limit(page_size)
                )
            ).all()

        return Page(
            items=[self._to_entity(model, count) for model, count in rows],
            page=page,
            page_size=page_size,
            total=total or 0,
        )

    async def list_for_user(
        self, principal_id: str, page: int, page_size: int
    ) -> Page[Channel]:
        offset = Page.offset_for(page, page_size)

        async with self.database.session() as session:
            total = await session.scalar(
                select(func.count())
                .select_from(ChannelMemberModel)
                .where(ChannelMemberModel.principal_id == principal_id)
            )
            rows = (
                await session.execute(
                    select(ChannelModel, self._member_count())
                    .join(
                        ChannelMemberModel,
                        ChannelMemberModel.channel_id == ChannelModel.id,
                    )
                    .where(ChannelMemberModel.principal_id == principal_id)
                    .order_by(ChannelModel.created_at.desc(), ChannelModel.id.desc())
                    .offset(offset)
                    .limit(page_size)
                )
            ).all()

        return Page(
            items=[self._to_entity(model, count) for model, count in rows],
            page=page,
            page_size=page_size,
            total=total or 0,
        )

    async def add_member(self, channel_id: int, principal_id: str) -> Membership:
        try:
            async with self.database.session() as session:
                if await session.get(ChannelModel, channel_id) is None:
                    raise NotFoundError("Channel", channel_id)

                existing = await session.get(
                    ChannelMemberModel, (channel_id, principal_id)
                )
                if existing is not None:
                    return self._to_membership(existing)

                model = ChannelMemberModel(
                    channel_id=channel_id,
                    principal_id=principal_id,
                    joined_at=utc_now(),
                )
                session.add(model)
                await session.flush()
                membership = self._to_membership(model)
        except IntegrityError:
            # Concurrent join inserted the same row first.
            membership = await self._find_membership(channel_id, principal_id)
            if membership is None:
                raise
            return membership

        if self.reporter:
            self.reporter.debug(
                f"Member added: {principal_id} -> channel {channel_id}",
                context="ChannelStore",
            )

        return membership

    async def remove_member(self, channel_id: int, principal_id: str) -> bool:
        async with self.database.session() as session:
            result = await session.execute(
                delete(ChannelMemberModel).where(
                    ChannelMemberModel.channel_id == channel_id,
                    ChannelMemberModel.principal_id == principal_id,
                )
            )
            removed = result.rowcount > 0

        if removed and self.reporter:
            self.reporter.debug(
                f"Member removed: {principal_id} <- channel {channel_id}",
                context="ChannelStore",
            )

        return removed

    async def is_member(self, channel_id: int, principal_id: str) -> bool:
        return await self._find_membership(channel_id, principal_id) is not None

    async def count_members(self, channel_id: int) -> int:
        async with self.database.session() as session:
            count = await session.scalar(
                select(func.count())
                .select_from(ChannelMemberModel)
                .where(ChannelMemberModel.channel_id == channel_id)
            )
        return count or 0

    async def _find_membership(
        self, channel_id: int, principal_id: str
    ) -> Optional[Membership]:
        async with self.database.session() as session:
            model = await session.get(ChannelMemberModel, (channel_id, principal_id))
            return self._to_membership(model) if model else None

    @staticmethod
    def _member_count():
        members = aliased(ChannelMemberModel)
        return (
            select(func.count())
            .select_from(members)
            .where(members.channel_id == ChannelModel.id)
            .correlate(ChannelModel)
            .scalar_subquery()
            .label("member_count")
        )

    @staticmethod
    def _to_entity(model: ChannelModel, member_count: int = 0) -> Channel:
        return Channel(
            id=model.id,
            name=model.name,
            slug=model.slug,
            created_by=model.created_by,
            visibility=Visibility(model.visibility),
            description=model.description,
            created_at=as_utc(model.created_at),
            member_count=member_count or 0,
        )

    @staticmethod
    def _to_membership(model: ChannelMemberModel) -> Membership:
        return Membership(
            channel_id=model.channel_id,
            principal_id=model.principal_id,
            joined_at=as_utc(model.joined_at),
        )
