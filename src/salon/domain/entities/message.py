"""
Message entity - an immutable chat message.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from salon.domain.entities.principal import Principal


@dataclass(frozen=True)
class Message:
    """
    Message posted to exactly one channel by exactly one sender.

    Messages are immutable once stored. Order inside a channel is defined
    by ``position`` and ties are broken by ``id``.

    Attributes:
        id: Database identifier, ascending
        channel_id: Owning channel
        position: Strictly increasing sequence number within the channel
        sender_id: Principal id of the sender
        sender_name: Sender display name captured at send time
        content: Message text
        created_at: Creation timestamp (UTC)
        read_at: Optional read marker
    """

    id: int
    channel_id: int
    position: int
    sender_id: str
    sender_name: str
    content: str
    created_at: datetime
    read_at: Optional[datetime] = None

    @property
    def sender(self) -> Principal:
        """Sender as a principal value."""
        return Principal(id=self.sender_id, display_name=self.sender_name)

    def is_read(self) -> bool:
        """Check if the read marker is set."""
        return self.read_at is not None
