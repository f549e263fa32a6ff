"""
Domain entities for Salon.
"""

from salon.domain.entities.channel import Channel, Visibility
from salon.domain.entities.membership import Membership
from salon.domain.entities.message import Message
from salon.domain.entities.principal import Principal

__all__ = ["Channel", "Visibility", "Membership", "Message", "Principal"]
