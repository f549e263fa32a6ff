"""
Message store interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from salon.domain.entities.message import Message
from salon.domain.value_objects.page import Page


class IMessageStore(ABC):
    """Interface for append-only message persistence."""

    @abstractmethod
    async def append(
        self,
        channel_id: int,
        sender_id: str,
        sender_name: str,
        content: str,
    ) -> Message:
        """
        Append a message to a channel.

        Assigns the next position in the channel. Performs no
        authorization or membership checks.

        Args:
            channel_id: Target channel
            sender_id: Principal id of the sender
            sender_name: Sender display name at send time
            content: Message text

        Returns:
            Stored message

        Raises:
            ValidationError: If content is empty or too long
        """

    @abstractmethod
    async def page_for_channel(
        self, channel_id: int, page: int, page_size: int
    ) -> Page[Message]:
        """
        Get a page of channel history, oldest first.

        Args:
            channel_id: Channel to read
            page: Page number (1-based)
            page_size: Messages per page

        Returns:
            Page of messages ordered by position
        """

    @abstractmethod
    async def find_by_id(self, message_id: int) -> Optional[Message]:
        """
        Get message by ID.

        Returns:
            Message if found, None otherwise
        """
