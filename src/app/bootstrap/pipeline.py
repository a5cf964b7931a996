"""Composition root do pipeline de requisições.

Cria uma instância de cada componente (MetricsRegistry, ResponseCache,
RequestExecutor) e expõe a superfície de métricas e cache consumida pelos
adapters de plataforma e pelo operador do SDK.

Uso:
    pipeline = create_pipeline()
    response = await pipeline.executor.post(url, body, headers, Platform.WHATSAPP)
    pipeline.get_performance_summary()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.constants.platforms import HttpMethod, Platform
from app.infra.cache import ResponseCache
from app.infra.http import HttpClientConfig, RequestExecutor
from app.observability import HealthMonitor, MetricsRegistry
from app.observability.health import HealthLevel, classify
from config.settings import get_http_settings

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from app.observability import (
        HealthReport,
        InFlightRecord,
        PerformanceSummary,
        PlatformMetrics,
    )
    from config.settings import HttpSettings

logger = logging.getLogger(__name__)

_MISS = object()

# Limiares das sugestões de otimização
LOW_CACHE_EFFICIENCY = 0.3
HIGH_CACHE_EFFICIENCY = 0.7
MIN_REQUESTS_FOR_CACHE_ADVICE = 50
HIGH_VOLUME_REQUESTS = 1000


@dataclass(frozen=True)
class PlatformAnalysis:
    status: HealthLevel
    issues: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PerformanceAnalysis:
    """Diagnóstico derivado do PerformanceSummary."""

    overall: HealthLevel
    suggestions: list[str]
    warnings: list[str]
    platform_analysis: dict[Platform, PlatformAnalysis]


class MessagingPipeline:
    """Fachada com o executor e a superfície de métricas/cache."""

    def __init__(
        self,
        executor: RequestExecutor,
        metrics: MetricsRegistry,
        cache: ResponseCache,
        health: HealthMonitor | None = None,
    ) -> None:
        self._executor = executor
        self._metrics = metrics
        self._cache = cache
        self._health = health or HealthMonitor(metrics)

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def health(self) -> HealthMonitor:
        return self._health

    # Métricas

    def get_metrics(self, platform: Platform | str) -> PlatformMetrics:
        return self._metrics.get_metrics(platform)

    def get_all_metrics(self) -> dict[Platform, PlatformMetrics]:
        return self._metrics.get_all_metrics()

    def get_performance_summary(self) -> PerformanceSummary:
        return self._metrics.get_performance_summary()

    def get_recent_requests(
        self,
        platform: Platform | str | None = None,
        limit: int = 50,
    ) -> list[InFlightRecord]:
        return self._metrics.get_recent_requests(platform, limit)

    def reset_metrics(self) -> None:
        self._metrics.reset_metrics()

    def get_cache_stats(self) -> dict[str, Any]:
        """Eficiência global de cache e hits/misses por plataforma."""
        summary = self._metrics.get_performance_summary()
        return {
            "summary": {
                "total_requests": summary.total_requests,
                "cache_efficiency": summary.cache_efficiency,
                **self._cache.get_stats(),
            },
            "by_platform": {
                platform: {
                    "cache_hits": metrics.cache_hits,
                    "cache_misses": metrics.cache_misses,
                    "hit_rate": metrics.cache_hit_rate,
                }
                for platform, metrics in self._metrics.get_all_metrics().items()
            },
        }

    def get_performance_analysis(self) -> PerformanceAnalysis:
        """Diagnóstico com avisos e sugestões de otimização."""
        summary = self._metrics.get_performance_summary()
        overall, warnings = classify(
            summary.overall_error_rate,
            summary.average_response_time_ms,
            "average response time",
        )

        suggestions: list[str] = []
        if (
            summary.cache_efficiency < LOW_CACHE_EFFICIENCY
            and summary.total_requests > MIN_REQUESTS_FOR_CACHE_ADVICE
        ):
            suggestions.append(
                "Consider implementing response caching for frequently accessed data"
            )
        elif summary.cache_efficiency > HIGH_CACHE_EFFICIENCY:
            suggestions.append(
                "Good cache efficiency! Consider expanding caching to more endpoints"
            )

        platform_analysis: dict[Platform, PlatformAnalysis] = {}
        for platform, metrics in self._metrics.get_all_metrics().items():
            status, issues = classify(
                metrics.error_rate,
                metrics.average_response_time_ms,
                "response time",
            )
            platform_analysis[platform] = PlatformAnalysis(status=status, issues=issues)

        if summary.total_requests > HIGH_VOLUME_REQUESTS:
            suggestions.append(
                "Consider implementing request batching for high-volume use cases"
            )
        if not suggestions:
            suggestions.append(
                "Performance looks good! Continue monitoring for optimization opportunities"
            )

        return PerformanceAnalysis(
            overall=overall,
            suggestions=suggestions,
            warnings=warnings,
            platform_analysis=platform_analysis,
        )

    async def check_health(self) -> HealthReport:
        return await self._health.check_health()

    # Cache

    @staticmethod
    def generate_cache_key(
        platform: Platform | str,
        method: str,
        params: dict[str, Any],
    ) -> str:
        return MetricsRegistry.generate_cache_key(platform, method, params)

    def get_cached_response(self, key: str, default: Any = None) -> Any:
        return self._cache.get(key, default)

    def cache_response(self, key: str, value: Any, ttl_ms: float | None = None) -> None:
        self._cache.set(key, value, ttl_ms)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def get_json_cached(
        self,
        url: str,
        headers: Mapping[str, str] | None,
        platform: Platform | str,
        params: dict[str, Any],
        ttl_ms: float | None = None,
    ) -> Any:
        """GET com cache de leitura: consulta o cache antes do executor.

        Em hit, a requisição é registrada nas métricas como cache hit sem
        chamada de rede. Em miss, o JSON da resposta é armazenado.
        Um corpo JSON `null` armazenado também conta como hit.
        """
        key = self.generate_cache_key(platform, str(HttpMethod.GET), params)
        cached = self._cache.get(key, _MISS)
        if cached is not _MISS:
            token = self._metrics.start(platform, str(HttpMethod.GET))
            self._metrics.end(token, success=True, cache_hit=True)
            return cached

        response = await self._executor.get(url, headers, platform)
        data = response.json()
        self._cache.set(key, data, ttl_ms)
        return data


def create_pipeline(
    settings: HttpSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> MessagingPipeline:
    """Factory para o pipeline com config padrão.

    Args:
        settings: HttpSettings opcional. Se None, carrega do ambiente.
        transport: Transporte httpx opcional (testes, proxies).

    Returns:
        Pipeline com instâncias próprias de métricas, cache e executor.
    """
    http = settings or get_http_settings()
    metrics = MetricsRegistry(history_size=http.metrics_history_size)
    cache = ResponseCache(
        max_size=http.cache_max_size,
        default_ttl_ms=http.cache_default_ttl_ms,
    )
    executor = RequestExecutor(
        HttpClientConfig.from_settings(http),
        metrics=metrics,
        transport=transport,
    )
    logger.debug(
        "pipeline_created",
        extra={
            "component": "bootstrap",
            "timeout_ms": http.timeout_ms,
            "max_retries": http.max_retries,
        },
    )
    return MessagingPipeline(executor, metrics, cache)
