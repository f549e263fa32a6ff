"""
Persistence layer - SQLAlchemy async database and stores.
"""

from salon.infrastructure.persistence.channel_store import SQLChannelStore
from salon.infrastructure.persistence.database import Database
from salon.infrastructure.persistence.message_store import SQLMessageStore
from salon.infrastructure.persistence.models import (
    Base,
    ChannelMemberModel,
    ChannelModel,
    MessageModel,
)

__all__ = [
    "Base",
    "ChannelMemberModel",
    "ChannelModel",
    "Database",
    "MessageModel",
    "SQLChannelStore",
    "SQLMessageStore",
]
