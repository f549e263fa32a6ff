"""
Channel store interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from salon.domain.entities.channel import Channel, Visibility
from salon.domain.entities.membership import Membership
from salon.domain.value_objects.page import Page


class IChannelStore(ABC):
    """Interface for channel and membership persistence."""

    @abstractmethod
    async def create(
        self,
        name: str,
        visibility: Visibility,
        creator_id: str,
        description: Optional[str] = None,
    ) -> Channel:
        """
        Create a channel and record its creator as the first member.

        Both rows are written in one transaction.

        Args:
            name: Channel name (trimmed, unique)
            visibility: Public or private
            creator_id: Principal id of the creator
            description: Optional description

        Returns:
            Created channel

        Raises:
            ValidationError: If name is empty, too long or already taken,
                or description is too long
        """

    @abstractmethod
    async def find_by_id(self, channel_id: int) -> Optional[Channel]:
        """
        Get channel by ID.

        Returns:
            Channel if found, None otherwise
        """

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[Channel]:
        """
        Get channel by slug.

        Returns:
            Channel if found, None otherwise
        """

    @abstractmethod
    async def list_public(self, page: int, page_size: int) -> Page[Channel]:
        """
        List public channels, newest first.

        Args:
            page: Page number (1-based)
            page_size: Channels per page

        Returns:
            Page of channels
        """

    @abstractmethod
    async def list_for_user(
        self, principal_id: str, page: int, page_size: int
    ) -> Page[Channel]:
        """
        List channels the principal is a member of, newest first.

        Args:
            principal_id: Member principal id
            page: Page number (1-based)
            page_size: Channels per page

        Returns:
            Page of channels
        """

    @abstractmethod
    async def add_member(self, channel_id: int, principal_id: str) -> Membership:
        """
        Add a principal to a channel. Idempotent.

        Returns:
            The (possibly pre-existing) membership

        Raises:
            NotFoundError: If the channel does not exist
        """

    @abstractmethod
    async def remove_member(self, channel_id: int, principal_id: str) -> bool:
        """
        Remove a principal from a channel. Idempotent.

        Returns:
            True if a membership was removed, False if there was none
        """

    @abstractmethod
    async def is_member(self, channel_id: int, principal_id: str) -> bool:
        """Check if the principal is a member of the channel."""

    @abstractmethod
    async def count_members(self, channel_id: int) -> int:
        """Number of members of the channel."""
