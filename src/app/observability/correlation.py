"""Correlation_id das requisições outbound.

O correlation_id do contexto atual é anexado aos logs de cada requisição e
pode ser fixado pelo chamador (ex: id do webhook que originou o envio).
Usa ContextVar para ser thread/async-safe.

Uso:
    from app.observability import bind_correlation_id

    with bind_correlation_id(inbound_event_id):
        await executor.post(url, body, headers, Platform.WHATSAPP)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def new_correlation_id() -> str:
    """Gera um novo correlation_id (UUID v4)."""
    return str(uuid.uuid4())


def get_correlation_id() -> str:
    """Retorna o correlation_id do contexto atual ou string vazia."""
    return _correlation_id.get()


def ensure_correlation_id() -> str:
    """Retorna o correlation_id atual, gerando um novo se ausente.

    O id gerado não é gravado no contexto: vale apenas para a chamada.
    """
    return _correlation_id.get() or new_correlation_id()


@contextmanager
def bind_correlation_id(correlation_id: str | None = None) -> Iterator[str]:
    """Fixa o correlation_id durante o bloco e restaura o anterior na saída.

    Args:
        correlation_id: ID a fixar. Se None, gera um novo UUID.

    Yields:
        correlation_id efetivo do bloco.
    """
    value = correlation_id or new_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)
