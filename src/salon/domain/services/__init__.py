"""
Domain service interfaces for Salon.
"""

from salon.domain.services.i_event_publisher import IEventPublisher

__all__ = ["IEventPublisher"]
