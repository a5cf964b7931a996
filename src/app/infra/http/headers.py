"""Sanitização e montagem de headers outbound."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from config.settings.http import DEFAULT_USER_AGENT

# Headers controlados pelo transporte; nunca aceitos do chamador
DANGEROUS_HEADERS = frozenset({"host", "origin", "referer"})

MAX_HEADER_VALUE_LENGTH = 2048

_INJECTION_CHARS = re.compile(r"[\r\n\t]")


def sanitize_headers(headers: Mapping[str, Any] | None) -> dict[str, str]:
    """Remove headers perigosos e conteúdo injetável.

    - host/origin/referer são descartados (case-insensitive)
    - CR, LF e TAB são removidos dos valores, que são então aparados
    - valores vazios, não-string ou com mais de 2048 caracteres são descartados
    """
    if not headers:
        return {}

    sanitized: dict[str, str] = {}
    for name, value in headers.items():
        if name.lower() in DANGEROUS_HEADERS:
            continue
        if not isinstance(value, str):
            continue
        cleaned = _INJECTION_CHARS.sub("", value).strip()
        if cleaned and len(cleaned) <= MAX_HEADER_VALUE_LENGTH:
            sanitized[name] = cleaned
    return sanitized


def default_headers(user_agent: str = DEFAULT_USER_AGENT) -> dict[str, str]:
    """Headers fixos enviados em toda requisição."""
    return {
        "User-Agent": user_agent,
        "Content-Type": "application/json",
        "X-Requested-With": "XMLHttpRequest",
        "Cache-Control": "no-cache",
        "Pragma": "no-cache",
    }


def build_request_headers(
    sanitized: Mapping[str, str],
    user_agent: str = DEFAULT_USER_AGENT,
) -> dict[str, str]:
    """Combina os headers fixos com os do chamador.

    Headers do chamador prevalecem em colisão (comparação case-insensitive).
    """
    merged = default_headers(user_agent)
    overridden = {name.lower() for name in sanitized}
    merged = {k: v for k, v in merged.items() if k.lower() not in overridden}
    merged.update(sanitized)
    return merged
