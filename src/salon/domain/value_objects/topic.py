"""
Topic value object - immutable live fan-out address with validation.
"""

import re
from dataclasses import dataclass
from typing import ClassVar, Union


@dataclass(frozen=True)
class Topic:
    """
    Value object representing a validated topic name.

    Topic naming rules:
    - ``channel.{channel_id}``: members of a chat channel
    - ``user.{principal_id}``: private notifications of one principal
      (reserved, no payload contract yet)
    - Maximum 100 characters

    Examples:
        - channel.42
        - user.alice
    """

    name: str

    CHANNEL_PREFIX: ClassVar[str] = "channel."
    USER_PREFIX: ClassVar[str] = "user."
    PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^(channel\.[0-9]+|user\.[A-Za-z0-9._@\-]+)$"
    )
    MAX_LENGTH: ClassVar[int] = 100

    def __post_init__(self):
        """Validate topic name on creation."""
        if not self.name:
            raise ValueError("Topic name cannot be empty")

        if len(self.name) > self.MAX_LENGTH:
            raise ValueError(f"Topic name too long (max {self.MAX_LENGTH} characters)")

        if not self.PATTERN.match(self.name):
            raise ValueError(
                "Topic must be 'channel.<id>' or 'user.<principal id>'"
            )

    @classmethod
    def for_channel(cls, channel_id: Union[int, str]) -> "Topic":
        """Topic of a chat channel."""
        return cls(f"{cls.CHANNEL_PREFIX}{channel_id}")

    @classmethod
    def for_user(cls, principal_id: str) -> "Topic":
        """Private notification topic of a principal."""
        return cls(f"{cls.USER_PREFIX}{principal_id}")

    def is_channel_topic(self) -> bool:
        """Check if this is a chat channel topic."""
        return self.name.startswith(self.CHANNEL_PREFIX)

    def is_user_topic(self) -> bool:
        """Check if this is a user-specific topic."""
        return self.name.startswith(self.USER_PREFIX)

    def extract_channel_id(self) -> int:
        """
        Extract channel id from a channel topic.

        Raises:
            ValueError: If not a channel topic
        """
        if not self.is_channel_topic():
            raise ValueError(f"Not a channel topic: {self.name}")
        return int(self.name.split(".", 1)[1])

    def extract_user_id(self) -> str:
        """
        Extract principal id from a user topic.

        Raises:
            ValueError: If not a user topic
        """
        if not self.is_user_topic():
            raise ValueError(f"Not a user topic: {self.name}")
        return self.name.split(".", 1)[1]

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Topic({self.name!r})"
