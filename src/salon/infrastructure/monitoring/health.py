"""
Health check result types.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class HealthStatus(str, Enum):
    """Health status levels."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheck:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: Optional[str] = None
    duration: Optional[float] = None
    timestamp: Optional[datetime] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthReport:
    """
    Overall health report.

    Aggregates multiple health checks into overall status.
    """

    status: HealthStatus
    checks: Dict[str, HealthCheck]
    version: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "version": self.version,
            "checks": {
                name: {
                    "status": check.status.value,
                    "message": check.message,
                    "duration": check.duration,
                    **({"metadata": check.metadata} if check.metadata else {}),
                }
                for name, check in self.checks.items()
            },
        }

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    @property
    def is_ready(self) -> bool:
        """Healthy or degraded services still take traffic."""
        return self.status in (HealthStatus.HEALTHY, HealthStatus.DEGRADED)
