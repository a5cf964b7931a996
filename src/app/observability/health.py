"""Health checks do SDK sobre as métricas de requisições.

Uso:
    monitor = HealthMonitor(metrics)
    monitor.register_check("graph_api", my_check)

    report = await monitor.check_health()
    if not await monitor.is_ready():
        ...
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Literal

from config.settings import SDK_VERSION

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from app.observability.metrics import MetricsRegistry

logger = logging.getLogger(__name__)

HealthLevel = Literal["good", "warning", "critical"]

# Limiares de taxa de erro e latência média
ERROR_RATE_CRITICAL = 0.10
ERROR_RATE_WARNING = 0.05
RESPONSE_TIME_CRITICAL_MS = 5000
RESPONSE_TIME_WARNING_MS = 2000

PERFORMANCE_CHECK = "performance"


class HealthStatus(StrEnum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


_LEVEL_TO_STATUS: dict[str, HealthStatus] = {
    "good": HealthStatus.HEALTHY,
    "warning": HealthStatus.DEGRADED,
    "critical": HealthStatus.UNHEALTHY,
}


def classify(error_rate: float, avg_ms: float, label: str) -> tuple[HealthLevel, list[str]]:
    """Classifica taxa de erro e latência média contra os limiares."""
    status: HealthLevel = "good"
    issues: list[str] = []

    if error_rate > ERROR_RATE_CRITICAL:
        status = "critical"
        issues.append(f"High error rate: {error_rate * 100:.1f}%")
    elif error_rate > ERROR_RATE_WARNING:
        status = "warning"
        issues.append(f"Elevated error rate: {error_rate * 100:.1f}%")

    if avg_ms > RESPONSE_TIME_CRITICAL_MS:
        status = "critical"
        issues.append(f"Slow {label}: {avg_ms:.0f}ms")
    elif avg_ms > RESPONSE_TIME_WARNING_MS:
        if status != "critical":
            status = "warning"
        issues.append(f"Slower than optimal {label}: {avg_ms:.0f}ms")

    return status, issues


@dataclass(frozen=True)
class HealthCheckResult:
    name: str
    status: HealthStatus
    message: str
    duration_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class HealthReport:
    """Resultado agregado de todos os checks registrados."""

    status: HealthStatus
    timestamp: str
    uptime_ms: float
    version: str
    checks: list[HealthCheckResult]
    summary: dict[str, int]


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class HealthMonitor:
    """Executa health checks e deriva prontidão do SDK.

    Registra por padrão o check "performance", baseado no
    PerformanceSummary do MetricsRegistry.

    Args:
        metrics: Registro de métricas do pipeline.
        version: Versão reportada no HealthReport.
        clock: Relógio monotônico em milissegundos (injetável para testes).
    """

    def __init__(
        self,
        metrics: MetricsRegistry,
        *,
        version: str = SDK_VERSION,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._metrics = metrics
        self._version = version
        self._clock = clock or _monotonic_ms
        self._started_at = self._clock()
        self._checks: dict[str, Callable[[], Awaitable[HealthCheckResult]]] = {}
        self.register_check(PERFORMANCE_CHECK, self._check_performance)

    @property
    def check_names(self) -> list[str]:
        return list(self._checks)

    def register_check(
        self,
        name: str,
        check: Callable[[], Awaitable[HealthCheckResult]],
    ) -> None:
        """Registra (ou substitui) um check pelo nome."""
        self._checks[name] = check
        logger.debug("health_check_registered", extra={"check": name})

    def unregister_check(self, name: str) -> None:
        self._checks.pop(name, None)
        logger.debug("health_check_unregistered", extra={"check": name})

    async def check_health(self) -> HealthReport:
        """Executa todos os checks; qualquer unhealthy torna o relatório unhealthy.

        Um check que levanta exceção entra no relatório como unhealthy.
        """
        results: list[HealthCheckResult] = []
        for name, check in list(self._checks.items()):
            started = time.perf_counter()
            try:
                result = await check()
            except Exception as exc:
                logger.warning(
                    "health_check_failed",
                    extra={"check": name, "error": str(exc) or type(exc).__name__},
                )
                result = HealthCheckResult(
                    name=name,
                    status=HealthStatus.UNHEALTHY,
                    message=f"Health check failed: {exc}",
                )
            duration_ms = (time.perf_counter() - started) * 1000
            results.append(
                HealthCheckResult(
                    name=result.name,
                    status=result.status,
                    message=result.message,
                    duration_ms=duration_ms,
                    metadata=result.metadata,
                )
            )

        summary = {
            "total": len(results),
            "healthy": sum(1 for r in results if r.status == HealthStatus.HEALTHY),
            "degraded": sum(1 for r in results if r.status == HealthStatus.DEGRADED),
            "unhealthy": sum(1 for r in results if r.status == HealthStatus.UNHEALTHY),
        }
        if summary["unhealthy"]:
            overall = HealthStatus.UNHEALTHY
        elif summary["degraded"]:
            overall = HealthStatus.DEGRADED
        else:
            overall = HealthStatus.HEALTHY

        logger.info(
            "health_check_completed",
            extra={
                "status": str(overall),
                "total_checks": summary["total"],
                "healthy_checks": summary["healthy"],
            },
        )
        return HealthReport(
            status=overall,
            timestamp=datetime.now(UTC).isoformat(),
            uptime_ms=self.get_uptime_ms(),
            version=self._version,
            checks=results,
            summary=summary,
        )

    def get_uptime_ms(self) -> float:
        return max(self._clock() - self._started_at, 0.0)

    def get_formatted_uptime(self) -> str:
        """Uptime legível: "2d 3h 4m", "3h 4m", "4m 5s" ou "5s"."""
        seconds = int(self.get_uptime_ms() // 1000)
        minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400

        if days:
            return f"{days}d {hours % 24}h {minutes % 60}m"
        if hours:
            return f"{hours}h {minutes % 60}m"
        if minutes:
            return f"{minutes}m {seconds % 60}s"
        return f"{seconds}s"

    async def is_ready(self) -> bool:
        """Pronto para tráfego enquanto nenhum check estiver unhealthy."""
        report = await self.check_health()
        return report.status != HealthStatus.UNHEALTHY

    def is_alive(self) -> bool:
        return True

    async def _check_performance(self) -> HealthCheckResult:
        summary = self._metrics.get_performance_summary()
        level, issues = classify(
            summary.overall_error_rate,
            summary.average_response_time_ms,
            "average response time",
        )
        message = (
            f"Performance: {summary.total_requests} requests, "
            f"{summary.overall_error_rate * 100:.1f}% errors, "
            f"{summary.average_response_time_ms:.0f}ms avg response"
        )
        if issues:
            message = f"{message} - {'; '.join(issues)}"
        return HealthCheckResult(
            name=PERFORMANCE_CHECK,
            status=_LEVEL_TO_STATUS[level],
            message=message,
            metadata={
                "total_requests": summary.total_requests,
                "error_rate": summary.overall_error_rate,
                "average_response_time_ms": summary.average_response_time_ms,
                "cache_efficiency": summary.cache_efficiency,
            },
        )
