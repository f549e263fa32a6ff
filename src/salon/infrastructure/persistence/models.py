"""
SQLAlchemy models for Salon persistence.
"""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from salon.domain.timestamps import utc_now


class Base(DeclarativeBase):
    """Base class for all models."""


class ChannelModel(Base):
    """Channel database model."""

    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(
        String(120), unique=True, index=True, nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text)
    visibility: Mapped[str] = mapped_column(String(10), index=True, nullable=False)
    created_by: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, index=True, nullable=False
    )

    # Relationships
    members: Mapped[list["ChannelMemberModel"]] = relationship(
        "ChannelMemberModel",
        back_populates="channel",
        lazy="select",
        cascade="all, delete-orphan",
    )


class ChannelMemberModel(Base):
    """Channel membership database model (channel x principal)."""

    __tablename__ = "channel_members"

    channel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("channels.id"), primary_key=True
    )
    principal_id: Mapped[str] = mapped_column(
        String(64), primary_key=True, index=True
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )

    # Relationships
    channel: Mapped["ChannelModel"] = relationship(
        "ChannelModel", back_populates="members"
    )


class MessageModel(Base):
    """Message database model. Rows are never updated."""

    __tablename__ = "messages"
    __table_args__ = (
        UniqueConstraint(
            "channel_id", "position", name="uq_messages_channel_position"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("channels.id"), index=True, nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    sender_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
