"""Taxonomia de falhas do pipeline de requisições.

Toda falha terminal de uma chamada outbound é levantada como uma subclasse
de MessagingError. O chamador (adapter de plataforma) converte a falha no
formato {success: False, error: {code, message, platform}} via
to_error_response().
"""

from __future__ import annotations

from typing import Any

# Plataforma usada quando a falha ocorre antes de saber o destino
ALL_PLATFORMS_MARKER = "all"


class MessagingError(Exception):
    """Base para falhas do pipeline de mensageria."""

    code: str = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        platform: str = ALL_PLATFORMS_MARKER,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.platform = str(platform)
        self.cause = cause

    def to_error_response(self) -> dict[str, Any]:
        """Formato de erro consumido pelos adapters de plataforma."""
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "platform": self.platform,
            },
        }


class InsecureUrlError(MessagingError):
    """URL sem esquema https (rejeitada antes de qualquer chamada)."""

    code = "INSECURE_URL"


class InvalidUrlError(MessagingError):
    """URL malformada."""

    code = "INVALID_URL"


class HttpStatusError(MessagingError):
    """Resposta com status fora da faixa 2xx. Nunca é retentada."""

    def __init__(self, status: int, body: str, platform: str = ALL_PLATFORMS_MARKER) -> None:
        super().__init__(f"HTTP {status}: {body}", platform)
        self.status = status
        self.body = body

    @property
    def code(self) -> str:  # type: ignore[override]
        return f"HTTP_{self.status}"


class RequestTimeoutError(MessagingError):
    """Chamada abortada pelo timeout da tentativa. Nunca é retentada."""

    code = "TIMEOUT"

    def __init__(
        self,
        timeout_ms: int,
        platform: str = ALL_PLATFORMS_MARKER,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(f"Request timed out after {timeout_ms}ms", platform, cause)
        self.timeout_ms = timeout_ms


class NetworkError(MessagingError):
    """Falha de transporte persistente após esgotar as tentativas."""

    code = "NETWORK_ERROR"

    def __init__(
        self,
        attempts: int,
        last_cause: BaseException,
        platform: str = ALL_PLATFORMS_MARKER,
    ) -> None:
        detail = str(last_cause) or type(last_cause).__name__
        super().__init__(
            f"Network error after {attempts} attempts: {detail}",
            platform,
            last_cause,
        )
        self.attempts = attempts
        self.last_cause = last_cause


class UnknownRequestError(MessagingError):
    """Fallback para desfechos não classificados."""

    code = "UNKNOWN_ERROR"
