"""
Membership entity - a principal belonging to a channel.
"""

from dataclasses import dataclass, field
from datetime import datetime

from salon.domain.timestamps import utc_now


@dataclass(frozen=True)
class Membership:
    """
    Durable record that a principal belongs to a channel.

    At most one membership exists per (channel, principal); it is the sole
    basis for read, write and subscribe authorization.
    """

    channel_id: int
    principal_id: str
    joined_at: datetime = field(default_factory=utc_now)
