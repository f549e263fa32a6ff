"""
Dependency Injection container for Salon.

Manages lifecycle and dependencies of all application components.
"""

from typing import Any, Dict, Optional

from salon.application.services import AuthorizationGate, PresenceBroker
from salon.application.use_cases import (
    AuthenticatePrincipal,
    CreateChannel,
    GetChannel,
    GetMessageHistory,
    JoinChannel,
    LeaveChannel,
    ListChannels,
    SendMessage,
)
from salon.config.settings import Settings
from salon.domain.timestamps import utc_now
from salon.infrastructure.auth import JWTVerifier
from salon.infrastructure.monitoring.health_checker import SalonHealthChecker
from salon.infrastructure.monitoring.system_reporter import SystemReporter
from salon.infrastructure.persistence import Database, SQLChannelStore, SQLMessageStore
from salon.infrastructure.shutdown import ShutdownManager
from salon.infrastructure.websocket import ConnectionManager


class Container:
    """
    Dependency Injection container.

    Creates and manages all application dependencies.
    Shared resources are lazily built singletons.
    """

    def __init__(self, settings: Settings, reporter: Optional[SystemReporter] = None):
        """
        Initialize container with settings.

        Args:
            settings: Application settings
            reporter: Optional SystemReporter (created from settings if None)
        """
        self.settings = settings
        self.reporter = reporter or SystemReporter.from_level_name(
            name="salon",
            level_name=settings.log_level,
            log_file=settings.log_file,
            verbose=settings.verbose,
        )

        self._database: Optional[Database] = None
        self._channel_store: Optional[SQLChannelStore] = None
        self._message_store: Optional[SQLMessageStore] = None
        self._gate: Optional[AuthorizationGate] = None
        self._connection_manager: Optional[ConnectionManager] = None
        self._broker: Optional[PresenceBroker] = None
        self._jwt_verifier: Optional[JWTVerifier] = None
        self._shutdown_manager: Optional[ShutdownManager] = None

        # Statistics
        self.stats: Dict[str, Any] = {
            "total_connections": 0,
            "total_frames_received": 0,
            "validation_failures": 0,
            "connection_rejections": 0,
            "connection_rejections_by_type": {},
            "start_time": utc_now(),
        }

    @property
    def database(self) -> Database:
        if self._database is None:
            self._database = Database(
                self.settings.database_url,
                echo=self.settings.database_echo,
                pool_size=self.settings.database_pool_size,
                max_overflow=self.settings.database_max_overflow,
            )
        return self._database

    @property
    def channel_store(self) -> SQLChannelStore:
        if self._channel_store is None:
            self._channel_store = SQLChannelStore(
                self.database,
                max_name_length=self.settings.max_channel_name_length,
                max_description_length=self.settings.max_description_length,
                reporter=self.reporter,
            )
        return self._channel_store

    @property
    def message_store(self) -> SQLMessageStore:
        if self._message_store is None:
            self._message_store = SQLMessageStore(
                self.database,
                max_content_length=self.settings.max_message_length,
                reporter=self.reporter,
            )
        return self._message_store

    @property
    def gate(self) -> AuthorizationGate:
        if self._gate is None:
            self._gate = AuthorizationGate(self.channel_store)
        return self._gate

    @property
    def connection_manager(self) -> ConnectionManager:
        """ConnectionManager singleton with configured connection limits."""
        if self._connection_manager is None:
            self._connection_manager = ConnectionManager(
                max_total_connections=self.settings.max_total_connections,
                max_connections_per_user=self.settings.max_connections_per_user,
                reporter=self.reporter,
            )
        return self._connection_manager

    @property
    def broker(self) -> PresenceBroker:
        if self._broker is None:
            self._broker = PresenceBroker(
                channel_store=self.channel_store,
                message_store=self.message_store,
                gate=self.gate,
                connection_manager=self.connection_manager,
                queue_size=self.settings.subscriber_queue_size,
                send_timeout=self.settings.delivery_timeout,
                reporter=self.reporter,
            )
        return self._broker

    @property
    def jwt_verifier(self) -> JWTVerifier:
        if self._jwt_verifier is None:
            self._jwt_verifier = JWTVerifier(
                secret=self.settings.jwt_secret,
                algorithm=self.settings.jwt_algorithm,
            )
        return self._jwt_verifier

    @property
    def shutdown_manager(self) -> ShutdownManager:
        if self._shutdown_manager is None:
            self._shutdown_manager = ShutdownManager(
                shutdown_timeout=self.settings.shutdown_timeout,
                grace_period=self.settings.shutdown_grace_period,
                reporter=self.reporter,
            )
        return self._shutdown_manager

    def get_health_checker(self) -> SalonHealthChecker:
        return SalonHealthChecker(
            settings=self.settings,
            database=self.database,
            connection_manager=self.connection_manager,
            shutdown_manager=self.shutdown_manager,
        )

    def get_authenticate_use_case(self) -> AuthenticatePrincipal:
        return AuthenticatePrincipal(self.jwt_verifier)

    def get_create_channel_use_case(self) -> CreateChannel:
        return CreateChannel(self.channel_store)

    def get_join_channel_use_case(self) -> JoinChannel:
        return JoinChannel(self.channel_store, self.gate)

    def get_leave_channel_use_case(self) -> LeaveChannel:
        return LeaveChannel(self.channel_store, self.gate, self.broker)

    def get_get_channel_use_case(self) -> GetChannel:
        return GetChannel(self.channel_store, self.gate)

    def get_list_channels_use_case(self) -> ListChannels:
        return ListChannels(
            self.channel_store,
            default_page_size=self.settings.default_channel_page_size,
            max_page_size=self.settings.max_page_size,
        )

    def get_message_history_use_case(self) -> GetMessageHistory:
        return GetMessageHistory(
            self.channel_store,
            self.message_store,
            self.gate,
            default_page_size=self.settings.default_message_page_size,
            max_page_size=self.settings.max_page_size,
        )

    def get_send_message_use_case(self) -> SendMessage:
        return SendMessage(self.broker)

    def increment_stat(self, stat_name: str, amount: int = 1) -> None:
        """
        Increment a statistic counter.

        Args:
            stat_name: Name of statistic to increment
            amount: Amount to increment by
        """
        if stat_name in self.stats:
            self.stats[stat_name] += amount

    def increment_connection_rejection(self, limit_type: str) -> None:
        """
        Increment connection rejection counter.

        Args:
            limit_type: Type of limit that caused rejection (global, per_user,
                shutdown)
        """
        self.stats["connection_rejections"] += 1
        by_type = self.stats["connection_rejections_by_type"]
        by_type[limit_type] = by_type.get(limit_type, 0) + 1

    def get_uptime_seconds(self) -> float:
        return (utc_now() - self.stats["start_time"]).total_seconds()

    def get_stats(self) -> Dict[str, Any]:
        """Runtime statistics for the /stats endpoint."""
        manager = self.connection_manager
        topics = manager.get_all_topics()

        return {
            "uptime_seconds": round(self.get_uptime_seconds(), 3),
            "active_connections": manager.get_total_connections(),
            "active_topics": len(topics),
            "topics": topics,
            "total_connections": self.stats["total_connections"],
            "total_frames_received": self.stats["total_frames_received"],
            "validation_failures": self.stats["validation_failures"],
            "connection_rejections": self.stats["connection_rejections"],
            "connection_rejections_by_type": dict(
                self.stats["connection_rejections_by_type"]
            ),
            "events_delivered": manager.events_delivered,
            "events_dropped": manager.events_dropped,
            **self.broker.get_stats(),
            "limits": {
                "max_total_connections": manager.max_total_connections,
                "max_connections_per_user": manager.max_connections_per_user,
                "subscriber_queue_size": self.settings.subscriber_queue_size,
            },
        }
