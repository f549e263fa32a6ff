"""
Presence-gated pub/sub broker.

Admits live subscriptions only after an authorization check, tells
subscribers who else is present and fans stored messages out to every
subscriber of a channel except the connection that sent them.
"""

import asyncio
from typing import Any, Dict, Optional

from salon.application.services.authorization_gate import AuthorizationGate
from salon.domain.entities.message import Message
from salon.domain.entities.principal import Principal
from salon.domain.events import (
    MemberInfo,
    MessageSentEvent,
    PresenceHereEvent,
    PresenceJoiningEvent,
    PresenceLeavingEvent,
    member_info,
)
from salon.domain.exceptions import AuthorizationError, NotFoundError
from salon.domain.repositories.i_channel_store import IChannelStore
from salon.domain.repositories.i_message_store import IMessageStore
from salon.domain.services.i_event_publisher import IEventPublisher
from salon.domain.value_objects.topic import Topic
from salon.infrastructure.monitoring.system_reporter import SystemReporter
from salon.infrastructure.websocket.connection_manager import ConnectionManager
from salon.infrastructure.websocket.live_connection import LiveConnection, Transport

SUBSCRIBE_DENIED = "You are not allowed to subscribe to this channel."

# Client libraries prefix presence and private topics this way.
TOPIC_PREFIXES = ("presence-", "private-")


class PresenceBroker:
    """
    Broker between channel membership and live connections.

    Subscriptions are checked once, when they are established. Sends are
    serialized per channel so that the order in which subscribers receive
    messages is the order of their stored positions.
    """

    def __init__(
        self,
        channel_store: IChannelStore,
        message_store: IMessageStore,
        gate: AuthorizationGate,
        connection_manager: ConnectionManager,
        publisher: Optional[IEventPublisher] = None,
        queue_size: int = 256,
        send_timeout: float = 5.0,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize broker.

        Args:
            channel_store: Channel and membership store
            message_store: Message store
            gate: Authorization gate
            connection_manager: Registry of live connections and topics
            publisher: Fan-out implementation (defaults to the manager)
            queue_size: Outbound queue size of new connections
            send_timeout: Seconds a single socket write may take
            reporter: Optional SystemReporter for logging
        """
        self.channel_store = channel_store
        self.message_store = message_store
        self.gate = gate
        self.connection_manager = connection_manager
        self.publisher = publisher or connection_manager
        self.queue_size = queue_size
        self.send_timeout = send_timeout
        self.reporter = reporter
        self._locks: Dict[int, asyncio.Lock] = {}
        self.messages_stored = 0
        self.events_published = 0
        self.publish_failures = 0
        self.delivery_failures = 0

    def _lock_for(self, channel_id: int) -> asyncio.Lock:
        return self._locks.setdefault(channel_id, asyncio.Lock())

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def connect(self, transport: Transport, principal: Principal) -> LiveConnection:
        """
        Register a new live connection and start its writer.

        Raises:
            ConnectionLimitExceeded: If a connection limit would be exceeded
        """
        connection = LiveConnection(
            transport,
            principal,
            queue_size=self.queue_size,
            send_timeout=self.send_timeout,
            reporter=self.reporter,
        )
        self.connection_manager.register(connection)
        connection.on_broken = self.disconnect
        connection.start()
        return connection

    async def disconnect(self, connection: LiveConnection) -> None:
        """Remove every subscription of a connection. Idempotent."""
        if connection.broken and self.connection_manager.is_registered(connection):
            self.delivery_failures += 1

        topics = await self.connection_manager.disconnect(connection)

        for topic_name in topics:
            self._announce_leaving(Topic(topic_name), connection.principal)

    # ------------------------------------------------------------------
    # Subscription authorization
    # ------------------------------------------------------------------

    async def authorize(self, principal: Principal, channel_id: int) -> MemberInfo:
        """
        Subscribe authorization callback.

        A missing channel and a channel the principal is not a member of
        produce the same denial.

        Returns:
            Presence descriptor of the principal

        Raises:
            AuthorizationError: If the principal may not subscribe
        """
        channel = await self.channel_store.find_by_id(channel_id)
        if channel is None or not await self.gate.can_read(principal, channel):
            raise AuthorizationError(
                SUBSCRIBE_DENIED,
                principal_id=principal.id,
                resource=str(Topic.for_channel(channel_id)),
            )
        return member_info(principal)

    async def authorize_topic(self, principal: Principal, topic_name: str) -> MemberInfo:
        """
        Authorize a subscription by topic name.

        Accepts ``channel.<id>`` and ``user.<principal id>``, optionally
        with a ``presence-`` or ``private-`` prefix.

        Raises:
            AuthorizationError: If the topic is unknown or not allowed
        """
        name = topic_name or ""
        for prefix in TOPIC_PREFIXES:
            if name.startswith(prefix):
                name = name[len(prefix):]
                break

        try:
            topic = Topic(name)
        except ValueError:
            raise AuthorizationError(
                SUBSCRIBE_DENIED, principal_id=principal.id, resource=topic_name
            )

        if topic.is_user_topic():
            if topic.extract_user_id() != principal.id:
                raise AuthorizationError(
                    SUBSCRIBE_DENIED, principal_id=principal.id, resource=topic.name
                )
            return member_info(principal)

        return await self.authorize(principal, topic.extract_channel_id())

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def subscribe(self, connection: LiveConnection, channel_id: int) -> MemberInfo:
        """
        Subscribe a connection to a channel topic.

        The new subscriber receives a ``presence.here`` snapshot. Other
        subscribers receive ``presence.joining`` unless the principal was
        already present through another connection. Redundant subscribes
        change nothing.

        Authorization and registration run under the channel lock, so a
        concurrent leave either denies the subscribe or evicts it.

        Raises:
            AuthorizationError: If the principal may not subscribe
        """
        async with self._lock_for(channel_id):
            return await self._subscribe(connection, channel_id)

    async def _subscribe(self, connection: LiveConnection, channel_id: int) -> MemberInfo:
        info = await self.authorize(connection.principal, channel_id)
        topic = Topic.for_channel(channel_id)
        principal = connection.principal

        already_present = self.connection_manager.principal_present(
            topic, principal.id
        )
        if not self.connection_manager.subscribe(connection, topic):
            return info

        members = self.connection_manager.present_principals(topic)
        connection.enqueue(
            PresenceHereEvent(
                channel_id=channel_id,
                members=[member_info(p) for p in members],
            ).to_frame()
        )

        if not already_present:
            self._publish(
                topic,
                PresenceJoiningEvent(channel_id=channel_id, member=info).to_frame(),
                exclude=connection.id,
            )

        if self.reporter:
            self.reporter.info(
                f"Subscribed [conn={connection.id}] [user={principal.id}] "
                f"[topic={topic}] [present={len(members)}]",
                context="PresenceBroker",
                verbose_level=2,
            )

        return info

    async def unsubscribe(self, connection: LiveConnection, channel_id: int) -> bool:
        """
        Unsubscribe a connection from a channel topic. Idempotent.

        Returns:
            True if a subscription was removed
        """
        topic = Topic.for_channel(channel_id)
        removed = self.connection_manager.unsubscribe(connection, topic)

        if removed:
            self._announce_leaving(topic, connection.principal)

        return removed

    async def leave(self, channel_id: int, principal_id: str) -> bool:
        """
        Remove a membership and evict its live subscriptions.

        Evicted connections are told with an ``unsubscribed`` frame.

        Both happen under the channel lock, so no subscribe can be
        authorized before the removal and registered after the eviction.

        Returns:
            True if a membership was removed
        """
        async with self._lock_for(channel_id):
            removed = await self.channel_store.remove_member(channel_id, principal_id)
            self._evict(channel_id, principal_id)
        return removed

    def _evict(self, channel_id: int, principal_id: str) -> int:
        topic = Topic.for_channel(channel_id)
        connections = self.connection_manager.connections_for(topic, principal_id)

        for connection in connections:
            self.connection_manager.unsubscribe(connection, topic)
            connection.enqueue(
                {"type": "unsubscribed", "channel_id": channel_id, "reason": "left"}
            )

        if connections:
            self._announce_leaving(topic, connections[0].principal)

            if self.reporter:
                self.reporter.info(
                    f"Evicted {len(connections)} subscription(s) "
                    f"[user={principal_id}] [topic={topic}]",
                    context="PresenceBroker",
                    verbose_level=2,
                )

        return len(connections)

    def _announce_leaving(self, topic: Topic, principal: Principal) -> None:
        if not topic.is_channel_topic():
            return
        if self.connection_manager.principal_present(topic, principal.id):
            return

        self._publish(
            topic,
            PresenceLeavingEvent(
                channel_id=topic.extract_channel_id(),
                member=member_info(principal),
            ).to_frame(),
        )

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    async def send(
        self,
        principal: Principal,
        channel_id: int,
        content: str,
        origin_connection_id: Optional[str] = None,
    ) -> Message:
        """
        Store a message and fan it out to the other subscribers.

        Args:
            principal: Sender
            channel_id: Target channel
            content: Message text
            origin_connection_id: Connection that must not get an echo

        Returns:
            Stored message

        Raises:
            NotFoundError: If the channel does not exist or is private and
                the sender is not a member
            AuthorizationError: If the sender is not a member
            ValidationError: If content is empty or too long
        """
        channel = await self.channel_store.find_by_id(channel_id)
        if channel is None:
            raise NotFoundError("Channel", channel_id)

        await self.gate.ensure_visible(principal, channel)

        async with self._lock_for(channel_id):
            await self.gate.ensure_can_write(principal, channel)
            message = await self.message_store.append(
                channel_id, principal.id, principal.display_name, content
            )
            self.messages_stored += 1

            self._publish(
                channel.topic,
                MessageSentEvent.from_message(message).to_frame(),
                exclude=origin_connection_id,
            )

        if self.reporter:
            self.reporter.debug(
                f"Message stored [id={message.id}] [channel={channel_id}] "
                f"[position={message.position}] [user={principal.id}]",
                context="PresenceBroker",
            )

        return message

    def _publish(
        self, topic: Topic, frame: Dict[str, Any], exclude: Optional[str] = None
    ) -> int:
        try:
            delivered = self.publisher.publish(topic, frame, exclude=exclude)
        except Exception as e:
            self.publish_failures += 1
            if self.reporter:
                self.reporter.error(
                    f"Publish failed [topic={topic}] [type={frame.get('type')}]: "
                    f"{type(e).__name__}: {e}",
                    context="PresenceBroker",
                )
            return 0

        self.events_published += delivered
        return delivered

    def get_stats(self) -> Dict[str, int]:
        return {
            "messages_stored": self.messages_stored,
            "events_published": self.events_published,
            "publish_failures": self.publish_failures,
            "delivery_failures": self.delivery_failures,
        }
