"""Logs estruturados do ciclo de vida das requisições (sem segredos).

Fire-and-forget: nenhuma falha de logging chega ao pipeline.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from config.logging import REDACTED, is_sensitive_key, redact_mapping

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Redige parâmetros de query sensíveis (ex: access_token)."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if not parts.query:
        return url
    query = [
        (key, REDACTED if is_sensitive_key(key) else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="[]")))


class RequestLogger:
    """Implementação padrão de RequestLoggerProtocol sobre logging."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def log_request_start(
        self,
        platform: str,
        method: str,
        url: str,
        meta: dict[str, Any] | None = None,
    ) -> None:
        try:
            self._logger.debug(
                "http_request_started",
                extra={
                    "platform": str(platform),
                    "method": method,
                    "endpoint": mask_url(url),
                    "meta": redact_mapping(meta or {}),
                },
            )
        except Exception:  # noqa: BLE001
            return

    def log_request_end(
        self,
        platform: str,
        method: str,
        url: str,
        duration_ms: float,
        success: bool,
        meta: dict[str, Any] | None = None,
    ) -> None:
        try:
            self._logger.log(
                logging.INFO if success else logging.WARNING,
                "http_request_completed" if success else "http_request_failed",
                extra={
                    "platform": str(platform),
                    "method": method,
                    "endpoint": mask_url(url),
                    "duration_ms": round(duration_ms, 2),
                    "success": success,
                    "meta": redact_mapping(meta or {}),
                },
            )
        except Exception:  # noqa: BLE001
            return
