"""
Event publisher interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from salon.domain.value_objects.topic import Topic


class IEventPublisher(ABC):
    """
    Interface for live event fan-out.

    Implementations deliver each event at most once to every subscriber
    of the topic and never let one subscriber's failure affect others.
    """

    @abstractmethod
    def publish(
        self,
        topic: Topic,
        event: Dict[str, Any],
        exclude: Optional[str] = None,
    ) -> int:
        """
        Publish an event to all subscribers of a topic.

        Must not wait on subscriber I/O.

        Args:
            topic: Destination topic
            event: JSON-ready event payload
            exclude: Connection id that must not receive the event

        Returns:
            Number of subscribers the event was handed to
        """
