"""Executor resiliente de requisições outbound.

Toda chamada às APIs de mensageria passa por aqui:
- Validação pré-voo da URL (https obrigatório)
- Sanitização de headers do chamador
- Timeout por tentativa
- Redirects seguidos, com o esquema de cada hop revalidado
- Retry com backoff exponencial apenas para falhas de transporte
- Registro único do desfecho em MetricsRegistry e no RequestLogger

Status HTTP fora de 2xx e timeouts falham na hora: repetir a mesma
requisição não muda o resultado dentro do prazo.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

import httpx

from app.constants.platforms import HttpMethod, Platform
from app.infra.http.headers import build_request_headers, sanitize_headers
from app.infra.http.models import HttpClientConfig, HttpResponse, RequestDescriptor
from app.infra.http.request_logger import RequestLogger
from app.infra.http.url_validator import HttpsUrlValidator
from app.observability import MetricsRegistry, ensure_correlation_id
from utils.errors import (
    HttpStatusError,
    MessagingError,
    NetworkError,
    RequestTimeoutError,
    UnknownRequestError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from app.protocols.request_logger import RequestLoggerProtocol
    from app.protocols.url_validator import UrlValidatorProtocol

logger = logging.getLogger(__name__)


class RequestExecutor:
    """Pipeline de requisições com timeout, retry e métricas.

    Args:
        config: Timeouts, retries e backoff padrão das projeções get/post/put/delete.
        metrics: Registro de métricas compartilhado.
        request_logger: Logger do ciclo de vida das requisições.
        url_validator: Validação pré-voo de URLs.
        transport: Transporte httpx (ex: httpx.MockTransport em testes).
        sleep: Função de espera do backoff, em segundos.
    """

    def __init__(
        self,
        config: HttpClientConfig | None = None,
        *,
        metrics: MetricsRegistry | None = None,
        request_logger: RequestLoggerProtocol | None = None,
        url_validator: UrlValidatorProtocol | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self._config = config or HttpClientConfig()
        self._metrics = metrics or MetricsRegistry()
        self._request_logger = request_logger or RequestLogger()
        self._url_validator = url_validator or HttpsUrlValidator()
        self._transport = transport
        self._sleep = sleep or asyncio.sleep

    @property
    def config(self) -> HttpClientConfig:
        return self._config

    @property
    def metrics(self) -> MetricsRegistry:
        return self._metrics

    async def execute(
        self,
        descriptor: RequestDescriptor,
        *,
        cache_hit: bool = False,
    ) -> HttpResponse:
        """Executa a requisição descrita.

        Args:
            descriptor: Requisição imutável.
            cache_hit: Marcação do chamador para as métricas de cache.

        Returns:
            HttpResponse com status 2xx.

        Raises:
            InsecureUrlError, InvalidUrlError: URL recusada (sem chamada de rede),
                ou redirect para destino fora de https.
            HttpStatusError: Status fora de 2xx.
            RequestTimeoutError: Tentativa excedeu timeout_ms.
            NetworkError: Falha de transporte após max_retries + 1 tentativas.
            UnknownRequestError: Desfecho não classificado.
        """
        self._url_validator.assert_https_url(descriptor.url)
        headers = build_request_headers(
            sanitize_headers(descriptor.headers),
            self._config.user_agent,
        )

        platform = descriptor.platform
        method = str(descriptor.method)
        token = self._metrics.start(platform, method)
        started = time.perf_counter()
        correlation_id = ensure_correlation_id()
        self._request_logger.log_request_start(
            platform,
            method,
            descriptor.url,
            {
                "timeout_ms": descriptor.timeout_ms,
                "max_retries": descriptor.max_retries,
                "correlation_id": correlation_id,
            },
        )

        def fail(error: MessagingError, /, **meta: Any) -> MessagingError:
            meta["correlation_id"] = correlation_id
            self._record(token, descriptor, started, success=False, error=error.message, meta=meta)
            return error

        last_error: BaseException | None = None
        try:
            for attempt in range(descriptor.max_retries + 1):
                try:
                    response = await self._send_once(descriptor, headers)
                except MessagingError as exc:
                    raise fail(exc, outcome="redirect_rejected", attempt=attempt + 1)
                except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
                    raise fail(
                        RequestTimeoutError(descriptor.timeout_ms, platform, exc),
                        outcome="timeout",
                        attempt=attempt + 1,
                    ) from exc
                except (httpx.TransportError, OSError) as exc:
                    last_error = exc
                    if attempt < descriptor.max_retries:
                        await self._backoff(attempt, platform)
                        continue
                    raise fail(
                        NetworkError(attempt + 1, exc, platform),
                        outcome="network",
                        attempts=attempt + 1,
                        last_error=str(exc) or type(exc).__name__,
                    ) from exc

                if not response.ok:
                    raise fail(
                        HttpStatusError(response.status, response.text(), platform),
                        outcome="http_status",
                        status=response.status,
                        attempt=attempt + 1,
                    )

                self._record(
                    token,
                    descriptor,
                    started,
                    success=True,
                    cache_hit=cache_hit,
                    meta={
                        "status": response.status,
                        "attempt": attempt + 1,
                        "correlation_id": correlation_id,
                    },
                )
                return response
        except MessagingError:
            raise
        except asyncio.CancelledError:
            self._record(
                token,
                descriptor,
                started,
                success=False,
                error="cancelled",
                meta={"outcome": "cancelled", "correlation_id": correlation_id},
            )
            raise
        except Exception as exc:
            raise fail(
                UnknownRequestError("Request failed for unknown reasons", platform, exc),
                outcome="unknown",
            ) from exc

        # Só alcançável com max_retries < 0
        raise fail(
            UnknownRequestError("Request failed for unknown reasons", platform, last_error),
            outcome="unknown",
        )

    async def request(
        self,
        method: HttpMethod | str,
        url: str,
        platform: Platform | str,
        body: str | bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HttpResponse:
        """Projeção genérica sobre execute() com timeout/retries da config."""
        descriptor = RequestDescriptor(
            method=HttpMethod(str(method).upper()),
            url=url,
            platform=Platform(platform),
            headers=headers or {},
            body=body,
            timeout_ms=self._config.timeout_ms,
            max_retries=self._config.max_retries,
        )
        return await self.execute(descriptor)

    async def get(
        self, url: str, headers: Mapping[str, str] | None, platform: Platform | str
    ) -> HttpResponse:
        return await self.request(HttpMethod.GET, url, platform, headers=headers)

    async def post(
        self,
        url: str,
        body: str | bytes | None,
        headers: Mapping[str, str] | None,
        platform: Platform | str,
    ) -> HttpResponse:
        return await self.request(HttpMethod.POST, url, platform, body=body, headers=headers)

    async def put(
        self,
        url: str,
        body: str | bytes | None,
        headers: Mapping[str, str] | None,
        platform: Platform | str,
    ) -> HttpResponse:
        return await self.request(HttpMethod.PUT, url, platform, body=body, headers=headers)

    async def delete(
        self, url: str, headers: Mapping[str, str] | None, platform: Platform | str
    ) -> HttpResponse:
        return await self.request(HttpMethod.DELETE, url, platform, headers=headers)

    def backoff_ms(self, attempt: int) -> int:
        """Atraso antes da próxima tentativa: base * 2^attempt, limitado ao teto."""
        return min(self._config.backoff_base_ms * (2**attempt), self._config.backoff_max_ms)

    async def _backoff(self, attempt: int, platform: Platform) -> None:
        delay_ms = self.backoff_ms(attempt)
        logger.info(
            "http_backoff",
            extra={
                "platform": str(platform),
                "attempt": attempt + 1,
                "backoff_ms": delay_ms,
            },
        )
        await self._sleep(delay_ms / 1000)

    async def _send_once(
        self,
        descriptor: RequestDescriptor,
        headers: dict[str, str],
    ) -> HttpResponse:
        """Uma tentativa, abortada ao atingir timeout_ms."""
        return await asyncio.wait_for(
            self._dispatch(descriptor, headers),
            timeout=descriptor.timeout_ms / 1000,
        )

    async def _dispatch(
        self,
        descriptor: RequestDescriptor,
        headers: dict[str, str],
    ) -> HttpResponse:
        async with httpx.AsyncClient(
            verify=self._config.verify_ssl,
            transport=self._transport,
            follow_redirects=True,
            event_hooks={"request": [self._check_request_url]},
        ) as client:
            response = await client.request(
                str(descriptor.method),
                descriptor.url,
                content=descriptor.body,
                headers=headers,
                timeout=descriptor.timeout_ms / 1000,
            )
        return HttpResponse(
            status=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            encoding=response.encoding or "utf-8",
        )

    async def _check_request_url(self, request: httpx.Request) -> None:
        """Revalida o esquema de cada hop (redirects inclusive)."""
        self._url_validator.assert_https_url(str(request.url))

    def _record(
        self,
        token: str,
        descriptor: RequestDescriptor,
        started: float,
        *,
        success: bool,
        meta: dict[str, Any],
        error: str | None = None,
        cache_hit: bool | None = None,
    ) -> None:
        """Registra o desfecho terminal (uma única vez por requisição)."""
        self._metrics.end(token, success, error=error, cache_hit=cache_hit)
        self._request_logger.log_request_end(
            descriptor.platform,
            str(descriptor.method),
            descriptor.url,
            (time.perf_counter() - started) * 1000,
            success,
            meta,
        )
