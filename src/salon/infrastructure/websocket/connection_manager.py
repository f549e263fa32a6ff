"""
WebSocket connection manager - in-memory topic registry and publisher.
"""

from typing import Any, Dict, List, Optional

from salon.domain.entities.principal import Principal
from salon.domain.services.i_event_publisher import IEventPublisher
from salon.domain.value_objects.topic import Topic
from salon.infrastructure.monitoring.system_reporter import SystemReporter
from salon.infrastructure.websocket.live_connection import LiveConnection


class ConnectionLimitExceeded(Exception):
    """Raised when connection limit is exceeded."""

    def __init__(self, message: str, limit_type: str):
        super().__init__(message)
        self.limit_type = limit_type


class ConnectionManager(IEventPublisher):
    """
    Manages live connections and their topic subscriptions.

    Registry mutations and publish snapshots run without awaiting, so on
    the event loop each of them is atomic with respect to the others.
    """

    def __init__(
        self,
        max_total_connections: int = 0,
        max_connections_per_user: int = 0,
        reporter: Optional[SystemReporter] = None,
    ):
        self.connections: Dict[str, LiveConnection] = {}
        self.topics: Dict[str, Dict[str, LiveConnection]] = {}
        self.max_total_connections = max_total_connections
        self.max_connections_per_user = max_connections_per_user
        self.reporter = reporter
        self.events_delivered = 0
        self.events_dropped = 0

        if self.reporter:
            self.reporter.info(
                f"ConnectionManager initialized (limits: "
                f"total={max_total_connections}, "
                f"per_user={max_connections_per_user})",
                context="ConnectionManager",
                verbose_level=2,
            )

    def check_connection_limits(self, principal_id: str) -> None:
        """Check if a new connection would exceed limits."""
        if self.max_total_connections > 0:
            total = self.get_total_connections()
            if total >= self.max_total_connections:
                if self.reporter:
                    self.reporter.warning(
                        f"Global connection limit exceeded "
                        f"(current={total}, limit={self.max_total_connections}, "
                        f"user={principal_id})",
                        context="ConnectionManager",
                    )
                raise ConnectionLimitExceeded(
                    f"Global connection limit reached: {self.max_total_connections}",
                    limit_type="global",
                )

        if self.max_connections_per_user > 0:
            user_count = self.get_user_connection_count(principal_id)
            if user_count >= self.max_connections_per_user:
                if self.reporter:
                    self.reporter.warning(
                        f"Per-user connection limit exceeded "
                        f"(user={principal_id}, current={user_count}, "
                        f"limit={self.max_connections_per_user})",
                        context="ConnectionManager",
                    )
                raise ConnectionLimitExceeded(
                    f"User connection limit reached: {self.max_connections_per_user}",
                    limit_type="per_user",
                )

    def register(self, connection: LiveConnection) -> None:
        """
        Register a new connection.

        Raises:
            ConnectionLimitExceeded: If a limit would be exceeded
        """
        self.check_connection_limits(connection.principal.id)
        self.connections[connection.id] = connection

        if self.reporter:
            self.reporter.info(
                f"Connection registered: conn={connection.id}, "
                f"user={connection.principal.id}, "
                f"total={self.get_total_connections()}",
                context="ConnectionManager",
                verbose_level=2,
            )

    def is_registered(self, connection: LiveConnection) -> bool:
        return self.connections.get(connection.id) is connection

    async def disconnect(self, connection: LiveConnection) -> List[str]:
        """
        Remove a connection from every topic and stop it.

        Returns:
            Topic names the connection was subscribed to
        """
        if self.connections.pop(connection.id, None) is None:
            await connection.stop()
            return []

        topics = sorted(connection.topics)
        for topic_name in topics:
            self._remove_from_topic(topic_name, connection)

        await connection.stop()

        if self.reporter:
            self.reporter.info(
                f"Connection removed: conn={connection.id}, "
                f"user={connection.principal.id}, topics={topics}, "
                f"sent={connection.frames_sent}, "
                f"dropped={connection.frames_dropped}, "
                f"total={self.get_total_connections()}",
                context="ConnectionManager",
                verbose_level=2,
            )

        return topics

    def subscribe(self, connection: LiveConnection, topic: Topic) -> bool:
        """
        Subscribe a registered connection to a topic.

        Returns:
            True if newly subscribed, False if redundant or not registered
        """
        if not self.is_registered(connection):
            return False

        subscribers = self.topics.setdefault(topic.name, {})
        if connection.id in subscribers:
            return False

        subscribers[connection.id] = connection
        connection.topics.add(topic.name)

        if self.reporter:
            self.reporter.debug(
                f"Subscribed: conn={connection.id}, topic={topic}, "
                f"subscribers={len(subscribers)}",
                context="ConnectionManager",
            )

        return True

    def unsubscribe(self, connection: LiveConnection, topic: Topic) -> bool:
        """
        Unsubscribe a connection from a topic.

        Returns:
            True if a subscription was removed, False if there was none
        """
        removed = self._remove_from_topic(topic.name, connection)

        if removed and self.reporter:
            self.reporter.debug(
                f"Unsubscribed: conn={connection.id}, topic={topic}",
                context="ConnectionManager",
            )

        return removed

    def _remove_from_topic(self, topic_name: str, connection: LiveConnection) -> bool:
        connection.topics.discard(topic_name)
        subscribers = self.topics.get(topic_name)
        if not subscribers or connection.id not in subscribers:
            return False

        del subscribers[connection.id]
        if not subscribers:
            del self.topics[topic_name]
        return True

    def publish(
        self,
        topic: Topic,
        event: Dict[str, Any],
        exclude: Optional[str] = None,
    ) -> int:
        """
        Queue an event for every subscriber of a topic.

        Iterates a snapshot of the subscriber set. A subscriber whose queue
        is full misses this event; the others are unaffected.

        Returns:
            Number of subscribers the event was queued for
        """
        snapshot = list(self.topics.get(topic.name, {}).values())
        delivered = 0

        for connection in snapshot:
            if connection.id == exclude:
                continue
            if connection.enqueue(event):
                delivered += 1
            else:
                self.events_dropped += 1

        self.events_delivered += delivered

        if self.reporter:
            self.reporter.debug(
                f"Published {event.get('type')} to {topic}: "
                f"delivered={delivered}, subscribers={len(snapshot)}, "
                f"excluded={exclude}",
                context="ConnectionManager",
            )

        return delivered

    def get_subscribers(self, topic: Topic) -> List[LiveConnection]:
        """Get all connections subscribed to a topic."""
        return list(self.topics.get(topic.name, {}).values())

    def connections_for(self, topic: Topic, principal_id: str) -> List[LiveConnection]:
        """Connections of one principal subscribed to a topic."""
        return [
            c for c in self.get_subscribers(topic) if c.principal.id == principal_id
        ]

    def principal_present(self, topic: Topic, principal_id: str) -> bool:
        """Check if a principal has at least one connection on a topic."""
        return any(
            c.principal.id == principal_id for c in self.get_subscribers(topic)
        )

    def present_principals(self, topic: Topic) -> List[Principal]:
        """Distinct principals on a topic, in subscription order."""
        seen: Dict[str, Principal] = {}
        for connection in self.get_subscribers(topic):
            seen.setdefault(connection.principal.id, connection.principal)
        return list(seen.values())

    async def close_all(self, code: int = 1001, reason: str = "") -> int:
        """Close every connection. Returns the number closed."""
        connections = list(self.connections.values())
        self.connections.clear()
        self.topics.clear()

        for connection in connections:
            connection.topics.clear()
            await connection.close(code=code, reason=reason)

        if self.reporter and connections:
            self.reporter.info(
                f"Closed {len(connections)} connections",
                context="ConnectionManager",
            )

        return len(connections)

    def get_total_connections(self) -> int:
        """Get total number of live connections."""
        return len(self.connections)

    def get_user_connection_count(self, principal_id: str) -> int:
        """Get connection count of one principal."""
        return sum(
            1 for c in self.connections.values() if c.principal.id == principal_id
        )

    def get_all_topics(self) -> Dict[str, int]:
        """Get all topics with subscriber counts."""
        return {name: len(subs) for name, subs in self.topics.items()}
