"""
Monitoring infrastructure for Salon.
"""

from salon.infrastructure.monitoring.health import (
    HealthCheck,
    HealthReport,
    HealthStatus,
)
from salon.infrastructure.monitoring.system_reporter import SystemReporter

__all__ = ["HealthCheck", "HealthReport", "HealthStatus", "SystemReporter"]
