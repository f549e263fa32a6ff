"""
Salon health checker.

Liveness reports that the process is up. Readiness checks the database,
the live connection capacity and the shutdown state.
"""

import time
from typing import Dict, Optional

from salon.config.settings import Settings
from salon.domain.timestamps import utc_now
from salon.infrastructure.monitoring.health import (
    HealthCheck,
    HealthReport,
    HealthStatus,
)
from salon.infrastructure.persistence.database import Database
from salon.infrastructure.shutdown.shutdown_manager import ShutdownManager
from salon.infrastructure.websocket.connection_manager import ConnectionManager

_SEVERITY = {
    HealthStatus.HEALTHY: 0,
    HealthStatus.DEGRADED: 1,
    HealthStatus.UNHEALTHY: 2,
}


class SalonHealthChecker:
    """
    Health checker for the Salon service.

    Checks:
    - Service liveness (basic check)
    - Database connectivity
    - WebSocket connection capacity
    - Shutdown state
    """

    def __init__(
        self,
        settings: Settings,
        database: Optional[Database] = None,
        connection_manager: Optional[ConnectionManager] = None,
        shutdown_manager: Optional[ShutdownManager] = None,
    ):
        self.settings = settings
        self.database = database
        self.connection_manager = connection_manager
        self.shutdown_manager = shutdown_manager

    def check_liveness(self) -> HealthReport:
        """Liveness probe - is the process alive?"""
        checks = {
            "service": HealthCheck(
                name="salon",
                status=HealthStatus.HEALTHY,
                message="Service is alive",
                timestamp=utc_now(),
            )
        }
        return self._report(checks)

    async def check_readiness(self) -> HealthReport:
        """Readiness probe - can the service take traffic?"""
        checks = {
            "database": await self._check_database(),
            "connection_capacity": self._check_connection_capacity(),
        }

        if self.shutdown_manager and self.shutdown_manager.is_shutting_down():
            checks["shutdown"] = HealthCheck(
                name="shutdown",
                status=HealthStatus.UNHEALTHY,
                message="Service is shutting down",
                timestamp=utc_now(),
                metadata=self.shutdown_manager.get_shutdown_info(),
            )

        return self._report(checks)

    def _report(self, checks: Dict[str, HealthCheck]) -> HealthReport:
        overall = max(
            (check.status for check in checks.values()),
            key=lambda s: _SEVERITY[s],
            default=HealthStatus.HEALTHY,
        )
        return HealthReport(
            status=overall,
            checks=checks,
            version=self.settings.app_version,
            timestamp=utc_now(),
        )

    async def _check_database(self) -> HealthCheck:
        start = time.time()

        if self.database is None:
            return HealthCheck(
                name="database",
                status=HealthStatus.UNHEALTHY,
                message="Database not configured",
                timestamp=utc_now(),
            )

        healthy = await self.database.health_check()
        duration = time.time() - start

        return HealthCheck(
            name="database",
            status=HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            message="Database reachable" if healthy else "Database unreachable",
            duration=duration,
            timestamp=utc_now(),
        )

    def _check_connection_capacity(self) -> HealthCheck:
        start = time.time()

        if self.connection_manager is None:
            return HealthCheck(
                name="connection_capacity",
                status=HealthStatus.UNHEALTHY,
                message="Connection manager not initialized",
                timestamp=utc_now(),
            )

        total_connections = self.connection_manager.get_total_connections()
        max_connections = self.settings.max_total_connections
        duration = time.time() - start

        metadata = {
            "total_connections": total_connections,
            "active_topics": len(self.connection_manager.get_all_topics()),
            "max_connections": max_connections if max_connections > 0 else None,
        }

        if max_connections <= 0:
            return HealthCheck(
                name="connection_capacity",
                status=HealthStatus.HEALTHY,
                message=f"Unlimited capacity ({total_connections} active)",
                duration=duration,
                timestamp=utc_now(),
                metadata=metadata,
            )

        capacity_pct = (total_connections / max_connections) * 100
        metadata["capacity_percent"] = round(capacity_pct, 1)

        # Degraded if over 90% capacity
        status = HealthStatus.DEGRADED if capacity_pct >= 90 else HealthStatus.HEALTHY
        return HealthCheck(
            name="connection_capacity",
            status=status,
            message=(
                f"{total_connections}/{max_connections} connections "
                f"({capacity_pct:.1f}%)"
            ),
            duration=duration,
            timestamp=utc_now(),
            metadata=metadata,
        )
