"""Testes da fachada MessagingPipeline e da factory create_pipeline."""

from __future__ import annotations

import logging

import httpx
import pytest

from app.bootstrap import (
    MessagingPipeline,
    create_pipeline,
    initialize_sdk,
    validate_runtime_settings,
)
from app.constants.platforms import Platform
from app.infra.cache import ResponseCache
from app.infra.http import RequestExecutor
from app.observability import MetricsRegistry
from config.logging import CorrelationIdFilter
from config.settings import HttpSettings, get_http_settings
from utils.errors import HttpStatusError

PROFILE_URL = "https://graph.facebook.com/v24.0/me"


class CountingHandler:
    """Handler de MockTransport que conta chamadas."""

    def __init__(self, status: int = 200, payload: dict | None = None) -> None:
        self.calls = 0
        self._status = status
        self._payload = payload or {"id": "page_1", "name": "Mesh Demo"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        return httpx.Response(self._status, json=self._payload)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _pipeline(handler: CountingHandler, clock: FakeClock | None = None) -> MessagingPipeline:
    metrics = MetricsRegistry(clock=clock)
    executor = RequestExecutor(metrics=metrics, transport=httpx.MockTransport(handler))
    return MessagingPipeline(executor, metrics, ResponseCache(clock=clock))


class TestCreatePipeline:
    """Factory com settings."""

    def test_builds_components_from_settings(self) -> None:
        settings = HttpSettings(timeout_ms=1234, max_retries=0, cache_max_size=7)
        pipeline = create_pipeline(settings)

        assert pipeline.executor.config.timeout_ms == 1234
        assert pipeline.executor.config.max_retries == 0
        assert pipeline.cache.get_stats()["max_size"] == 7

    def test_pipelines_do_not_share_state(self) -> None:
        first = create_pipeline(HttpSettings())
        second = create_pipeline(HttpSettings())
        first.cache_response("k", 1)
        assert second.get_cached_response("k") is None


class TestCachedGet:
    """Consulta ao cache antes do executor."""

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self) -> None:
        handler = CountingHandler()
        pipeline = _pipeline(handler)
        params = {"fields": "id,name", "access_token": "EAAB"}

        first = await pipeline.get_json_cached(PROFILE_URL, None, Platform.MESSENGER, params)
        second = await pipeline.get_json_cached(PROFILE_URL, None, Platform.MESSENGER, params)

        assert first == second == {"id": "page_1", "name": "Mesh Demo"}
        assert handler.calls == 1
        metrics = pipeline.get_metrics(Platform.MESSENGER)
        assert metrics.request_count == 2
        assert (metrics.cache_hits, metrics.cache_misses) == (1, 1)
        assert metrics.cache_hit_rate == 0.5

    @pytest.mark.asyncio
    async def test_expired_entry_hits_network_again(self) -> None:
        clock = FakeClock()
        handler = CountingHandler()
        pipeline = _pipeline(handler, clock)

        await pipeline.get_json_cached(PROFILE_URL, None, "instagram", {"id": 1}, ttl_ms=100)
        clock.now = 150
        await pipeline.get_json_cached(PROFILE_URL, None, "instagram", {"id": 1}, ttl_ms=100)

        assert handler.calls == 2

    @pytest.mark.asyncio
    async def test_clear_cache(self) -> None:
        handler = CountingHandler()
        pipeline = _pipeline(handler)

        await pipeline.get_json_cached(PROFILE_URL, None, "whatsapp", {"id": 1})
        pipeline.clear_cache()
        await pipeline.get_json_cached(PROFILE_URL, None, "whatsapp", {"id": 1})

        assert handler.calls == 2


class TestExportSurface:
    """Métricas expostas pela fachada."""

    @pytest.mark.asyncio
    async def test_summary_recent_and_reset(self) -> None:
        pipeline = _pipeline(CountingHandler())
        await pipeline.executor.get(PROFILE_URL, None, Platform.WHATSAPP)
        await pipeline.executor.get(PROFILE_URL, None, Platform.INSTAGRAM)

        summary = pipeline.get_performance_summary()
        assert summary.total_requests == 2
        assert len(pipeline.get_recent_requests()) == 2
        assert len(pipeline.get_recent_requests(Platform.WHATSAPP)) == 1
        assert pipeline.get_all_metrics()[Platform.INSTAGRAM].request_count == 1

        pipeline.reset_metrics()
        assert pipeline.get_performance_summary().total_requests == 0
        assert pipeline.get_recent_requests() == []

    @pytest.mark.asyncio
    async def test_cache_stats(self) -> None:
        pipeline = _pipeline(CountingHandler())
        await pipeline.get_json_cached(PROFILE_URL, None, "whatsapp", {"id": 1})
        await pipeline.get_json_cached(PROFILE_URL, None, "whatsapp", {"id": 1})

        stats = pipeline.get_cache_stats()
        assert stats["summary"]["total_requests"] == 2
        assert stats["summary"]["cache_efficiency"] == 0.5
        assert stats["summary"]["size"] == 1
        assert stats["by_platform"][Platform.WHATSAPP]["cache_hits"] == 1

    def test_generate_cache_key_matches_registry(self) -> None:
        params = {"id": "1"}
        assert MessagingPipeline.generate_cache_key(
            "whatsapp", "GET", params
        ) == MetricsRegistry.generate_cache_key("whatsapp", "GET", params)


class TestPerformanceAnalysis:
    """Diagnóstico por limiares."""

    def test_idle_pipeline_is_good(self) -> None:
        analysis = _pipeline(CountingHandler()).get_performance_analysis()
        assert analysis.overall == "good"
        assert analysis.warnings == []
        assert analysis.suggestions == [
            "Performance looks good! Continue monitoring for optimization opportunities"
        ]

    @pytest.mark.asyncio
    async def test_high_error_rate_is_critical(self) -> None:
        pipeline = _pipeline(CountingHandler(status=500))
        for _ in range(3):
            with pytest.raises(HttpStatusError):
                await pipeline.executor.get(PROFILE_URL, None, Platform.MESSENGER)

        analysis = pipeline.get_performance_analysis()
        assert analysis.overall == "critical"
        assert analysis.warnings == ["High error rate: 100.0%"]
        assert analysis.platform_analysis[Platform.MESSENGER].status == "critical"
        assert analysis.platform_analysis[Platform.WHATSAPP].status == "good"

    def test_slow_responses_warn(self) -> None:
        clock = FakeClock()
        pipeline = _pipeline(CountingHandler(), clock)
        metrics = pipeline.executor.metrics
        token = metrics.start(Platform.WHATSAPP, "POST")
        clock.now += 3000
        metrics.end(token, success=True)

        analysis = pipeline.get_performance_analysis()
        assert analysis.overall == "warning"
        assert analysis.platform_analysis[Platform.WHATSAPP].issues == [
            "Slower than optimal response time: 3000ms"
        ]


class TestValidateRuntimeSettings:
    """Validação de settings no startup."""

    @pytest.fixture(autouse=True)
    def _clear_settings_cache(self):
        get_http_settings.cache_clear()
        yield
        get_http_settings.cache_clear()

    def test_invalid_settings_fail_in_production(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("MESSAGE_MESH_TIMEOUT_MS", "0")
        with pytest.raises(RuntimeError, match="MESSAGE_MESH_TIMEOUT_MS"):
            validate_runtime_settings()

    def test_invalid_settings_only_warn_in_development(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ENVIRONMENT", "development")
        monkeypatch.setenv("MESSAGE_MESH_MAX_RETRIES", "-1")
        validate_runtime_settings()


def test_initialize_sdk_configures_json_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    monkeypatch.setenv("MESSAGE_MESH_LOG_LEVEL", "warning")
    get_http_settings.cache_clear()
    try:
        initialize_sdk()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert any(isinstance(f, CorrelationIdFilter) for f in root.handlers[0].filters)
    finally:
        root.handlers = handlers
        root.setLevel(level)
        get_http_settings.cache_clear()


@pytest.mark.asyncio
async def test_cached_json_null_is_served_from_cache() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, content=b"null")

    metrics = MetricsRegistry()
    executor = RequestExecutor(metrics=metrics, transport=httpx.MockTransport(handler))
    pipeline = MessagingPipeline(executor, metrics, ResponseCache())

    first = await pipeline.get_json_cached(PROFILE_URL, None, "messenger", {"id": 9})
    second = await pipeline.get_json_cached(PROFILE_URL, None, "messenger", {"id": 9})

    assert first is None and second is None
    assert len(calls) == 1
    assert pipeline.get_metrics(Platform.MESSENGER).cache_hits == 1


@pytest.mark.asyncio
async def test_check_health_reflects_failing_traffic() -> None:
    pipeline = _pipeline(CountingHandler(status=500))
    assert (await pipeline.check_health()).status == "healthy"

    with pytest.raises(HttpStatusError):
        await pipeline.executor.get(PROFILE_URL, None, Platform.INSTAGRAM)

    report = await pipeline.check_health()
    assert report.status == "unhealthy"
    assert [c.name for c in report.checks] == ["performance"]
    assert await pipeline.health.is_ready() is False
