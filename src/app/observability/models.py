"""Modelos de métricas de requisições outbound."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.constants.platforms import Platform


@dataclass
class InFlightRecord:
    """Ciclo de vida de uma requisição, do start ao end.

    Criado por MetricsRegistry.start e finalizado uma única vez por
    MetricsRegistry.end. Leitores externos recebem apenas cópias.
    """

    request_id: str
    platform: Platform
    method: str
    start_time: float
    end_time: float | None = None
    duration_ms: float | None = None
    success: bool = False
    error: str | None = None
    cache_hit: bool | None = None

    @property
    def completed(self) -> bool:
        return self.end_time is not None


@dataclass
class PlatformMetrics:
    """Agregados de uma plataforma.

    Invariantes (quando request_count > 0):
        average_response_time_ms == total_response_time_ms / request_count
        error_rate == error_count / request_count
    Ambos são 0 quando request_count == 0.
    """

    request_count: int = 0
    total_response_time_ms: float = 0.0
    average_response_time_ms: float = 0.0
    error_count: int = 0
    error_rate: float = 0.0
    last_request_time: float = 0.0
    cache_hits: int = 0
    cache_misses: int = 0
    cache_hit_rate: float = 0.0

    def fold(self, record: InFlightRecord) -> None:
        """Incorpora um registro finalizado aos agregados."""
        self.request_count += 1
        self.last_request_time = record.end_time or self.last_request_time

        self.total_response_time_ms += record.duration_ms or 0.0
        self.average_response_time_ms = self.total_response_time_ms / self.request_count

        if not record.success:
            self.error_count += 1
        self.error_rate = self.error_count / self.request_count

        if record.cache_hit:
            self.cache_hits += 1
        else:
            self.cache_misses += 1
        total_cache_requests = self.cache_hits + self.cache_misses
        self.cache_hit_rate = self.cache_hits / total_cache_requests


@dataclass(frozen=True)
class PlatformBreakdown:
    """Resumo de uma plataforma dentro do PerformanceSummary."""

    requests: int
    errors: int
    avg_response_time_ms: float


@dataclass(frozen=True)
class PerformanceSummary:
    """Totais entre plataformas mais o detalhamento por plataforma."""

    total_requests: int
    total_errors: int
    overall_error_rate: float
    average_response_time_ms: float
    cache_efficiency: float
    platform_breakdown: dict[Platform, PlatformBreakdown] = field(default_factory=dict)
