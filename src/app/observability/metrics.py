"""Registro de métricas das requisições outbound.

Mantém os registros em andamento, o histórico limitado e os agregados por
plataforma. Cada requisição finalizada também é emitida como log estruturado
(metric_latency) para agregação externa.

Uso:
    registry = MetricsRegistry()

    token = registry.start(Platform.WHATSAPP, "POST")
    # ... chamada HTTP ...
    registry.end(token, success=True)

    registry.get_metrics(Platform.WHATSAPP).average_response_time_ms
"""

from __future__ import annotations

import base64
import json
import logging
import threading
import time
import uuid
from collections import deque
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from app.constants.platforms import ALL_PLATFORMS, Platform
from app.observability.models import (
    InFlightRecord,
    PerformanceSummary,
    PlatformBreakdown,
    PlatformMetrics,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 1000
DEFAULT_RECENT_LIMIT = 50

# Campos removidos da chave de cache (nunca indexar por credencial)
_TOKEN_FIELDS = frozenset({"accessToken", "access_token"})


def _now_ms() -> float:
    return time.time() * 1000


class MetricsRegistry:
    """Métricas por plataforma com correlação por token opaco.

    Thread-safe: todas as leituras e mutações passam pelo mesmo lock.

    Args:
        history_size: Máximo de registros no histórico (ring buffer).
        clock: Relógio em milissegundos (injetável para testes).
    """

    def __init__(
        self,
        history_size: int = DEFAULT_HISTORY_SIZE,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._clock = clock or _now_ms
        self._lock = threading.Lock()
        self._metrics: dict[Platform, PlatformMetrics] = {
            platform: PlatformMetrics() for platform in ALL_PLATFORMS
        }
        self._history: deque[InFlightRecord] = deque(maxlen=history_size)
        self._in_flight: dict[str, InFlightRecord] = {}

    def start(self, platform: Platform | str, method: str) -> str:
        """Inicia o rastreamento de uma requisição.

        Returns:
            Token opaco para o end() correspondente.
        """
        record = InFlightRecord(
            request_id=uuid.uuid4().hex,
            platform=Platform(platform),
            method=method,
            start_time=self._clock(),
        )
        with self._lock:
            self._history.append(record)
            self._in_flight[record.request_id] = record
        return record.request_id

    def end(
        self,
        token: str,
        success: bool,
        error: str | None = None,
        cache_hit: bool | None = None,
    ) -> None:
        """Finaliza o registro do token e incorpora aos agregados.

        Tokens desconhecidos ou já finalizados são ignorados (com log).
        """
        with self._lock:
            record = self._in_flight.pop(token, None)
            if record is None:
                logger.warning("metrics_unknown_token", extra={"request_id": token})
                return

            record.end_time = self._clock()
            record.duration_ms = max(record.end_time - record.start_time, 0.0)
            record.success = success
            record.error = error
            record.cache_hit = cache_hit
            self._metrics[record.platform].fold(record)

        logger.info(
            "metric_latency",
            extra={
                "metric_type": "latency",
                "component": "http",
                "platform": str(record.platform),
                "operation": record.method,
                "latency_ms": round(record.duration_ms, 2),
                "success": success,
                "cache_hit": bool(cache_hit),
            },
        )

    def get_metrics(self, platform: Platform | str) -> PlatformMetrics:
        """Retorna cópia das métricas de uma plataforma."""
        with self._lock:
            return replace(self._metrics[Platform(platform)])

    def get_all_metrics(self) -> dict[Platform, PlatformMetrics]:
        """Retorna cópia das métricas de todas as plataformas."""
        with self._lock:
            return {platform: replace(m) for platform, m in self._metrics.items()}

    def get_recent_requests(
        self,
        platform: Platform | str | None = None,
        limit: int = DEFAULT_RECENT_LIMIT,
    ) -> list[InFlightRecord]:
        """Registros mais recentes primeiro, opcionalmente filtrados."""
        target = Platform(platform) if platform is not None else None
        with self._lock:
            records = [
                replace(r)
                for r in reversed(self._history)
                if target is None or r.platform == target
            ]
        return records[: max(limit, 0)]

    def reset_metrics(self) -> None:
        """Zera todos os agregados e limpa o histórico.

        Requisições em andamento continuam válidas e entram nos novos agregados.
        """
        with self._lock:
            for platform in self._metrics:
                self._metrics[platform] = PlatformMetrics()
            self._history.clear()
        logger.info("metrics_reset", extra={"component": "metrics", "action": "reset"})

    def get_performance_summary(self) -> PerformanceSummary:
        """Totais entre plataformas mais detalhamento por plataforma."""
        total_requests = 0
        total_errors = 0
        total_response_time = 0.0
        total_cache_hits = 0
        total_cache_requests = 0
        breakdown: dict[Platform, PlatformBreakdown] = {}

        with self._lock:
            for platform, metrics in self._metrics.items():
                total_requests += metrics.request_count
                total_errors += metrics.error_count
                total_response_time += metrics.total_response_time_ms
                total_cache_hits += metrics.cache_hits
                total_cache_requests += metrics.cache_hits + metrics.cache_misses
                breakdown[platform] = PlatformBreakdown(
                    requests=metrics.request_count,
                    errors=metrics.error_count,
                    avg_response_time_ms=metrics.average_response_time_ms,
                )

        return PerformanceSummary(
            total_requests=total_requests,
            total_errors=total_errors,
            overall_error_rate=total_errors / total_requests if total_requests else 0.0,
            average_response_time_ms=(
                total_response_time / total_requests if total_requests else 0.0
            ),
            cache_efficiency=(
                total_cache_hits / total_cache_requests if total_cache_requests else 0.0
            ),
            platform_breakdown=breakdown,
        )

    @property
    def in_flight_count(self) -> int:
        with self._lock:
            return len(self._in_flight)

    @staticmethod
    def generate_cache_key(
        platform: Platform | str,
        method: str,
        params: dict[str, Any],
    ) -> str:
        """Gera chave de cache determinística para uma chamada.

        Campos de access token são removidos; as chaves são ordenadas para
        que a mesma combinação de parâmetros produza sempre a mesma chave.
        """
        sanitized = {k: v for k, v in params.items() if k not in _TOKEN_FIELDS}
        serialized = json.dumps(
            sanitized,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        )
        encoded = base64.b64encode(serialized.encode("utf-8")).decode("ascii")
        return f"{Platform(platform)}:{method}:{encoded}"
