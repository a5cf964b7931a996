"""Filters de logging para injeção de contexto e redação de segredos.

Campos injetados:
- correlation_id: ID de rastreamento da requisição
- service: Nome do serviço (ex: message_mesh)

Campos redigidos: qualquer atributo do record cujo nome indique token,
senha ou segredo (ex: access_token passado via `extra`).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

REDACTED = "[REDACTED]"

# Comparação case-insensitive por substring
SENSITIVE_FIELDS: tuple[str, ...] = (
    "accesstoken",
    "access_token",
    "password",
    "secret",
    "authorization",
    "token",
)

# Atributos que o próprio logging cria e nunca carregam segredos
_SAFE_ATTRIBUTES = frozenset({"correlation_id", "msg", "message", "args"})


def is_sensitive_key(key: str) -> bool:
    """Retorna True se o nome do campo indica dado sensível."""
    lowered = key.lower()
    return any(field in lowered for field in SENSITIVE_FIELDS)


def redact_mapping(data: dict[str, Any]) -> dict[str, Any]:
    """Retorna cópia com campos sensíveis redigidos (recursivo em dicts)."""
    redacted: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(str(key)):
            redacted[key] = REDACTED
        elif isinstance(value, dict):
            redacted[key] = redact_mapping(value)
        else:
            redacted[key] = value
    return redacted


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Args:
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
            Se não fornecida, usa string vazia como fallback.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        """Adiciona correlation_id e service ao record.

        Se correlation_id já foi passado via `extra`, preserva o valor.
        """
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveDataFilter(logging.Filter):
    """Redige campos sensíveis passados via `extra` antes da formatação."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in list(vars(record).items()):
            if key in _SAFE_ATTRIBUTES:
                continue
            if is_sensitive_key(key):
                setattr(record, key, REDACTED)
            elif isinstance(value, dict):
                setattr(record, key, redact_mapping(value))
        return True
