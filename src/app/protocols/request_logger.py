"""Protocolo de logging do ciclo de vida das requisições.

Implementações são fire-and-forget e nunca levantam exceções.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RequestLoggerProtocol(Protocol):
    """Contrato de logging usado pelo RequestExecutor."""

    def log_request_start(
        self,
        platform: str,
        method: str,
        url: str,
        meta: dict[str, Any] | None = None,
    ) -> None: ...

    def log_request_end(
        self,
        platform: str,
        method: str,
        url: str,
        duration_ms: float,
        success: bool,
        meta: dict[str, Any] | None = None,
    ) -> None: ...
