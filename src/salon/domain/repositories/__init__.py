"""
Store interfaces for Salon.
"""

from salon.domain.repositories.i_channel_store import IChannelStore
from salon.domain.repositories.i_message_store import IMessageStore

__all__ = ["IChannelStore", "IMessageStore"]
