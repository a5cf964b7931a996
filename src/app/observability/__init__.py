"""Observabilidade: correlation_id, métricas e health checks das requisições outbound.

Uso:
    from app.observability import MetricsRegistry, bind_correlation_id
"""

from app.observability.correlation import (
    bind_correlation_id,
    ensure_correlation_id,
    get_correlation_id,
    new_correlation_id,
)
from app.observability.health import (
    HealthCheckResult,
    HealthMonitor,
    HealthReport,
    HealthStatus,
)
from app.observability.metrics import MetricsRegistry
from app.observability.models import (
    InFlightRecord,
    PerformanceSummary,
    PlatformBreakdown,
    PlatformMetrics,
)

__all__ = [
    "HealthCheckResult",
    "HealthMonitor",
    "HealthReport",
    "HealthStatus",
    "InFlightRecord",
    "MetricsRegistry",
    "PerformanceSummary",
    "PlatformBreakdown",
    "PlatformMetrics",
    "bind_correlation_id",
    "ensure_correlation_id",
    "get_correlation_id",
    "new_correlation_id",
]
