"""Modelos do pipeline HTTP: configuração, descritor de requisição e resposta."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from app.constants.platforms import HttpMethod, Platform
from config.settings.http import DEFAULT_USER_AGENT

if TYPE_CHECKING:
    from config.settings import HttpSettings


@dataclass
class HttpClientConfig:
    """Configuração do executor de requisições."""

    timeout_ms: int = 30_000
    max_retries: int = 3
    backoff_base_ms: int = 1_000
    backoff_max_ms: int = 10_000
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True

    @classmethod
    def from_settings(cls, settings: HttpSettings) -> HttpClientConfig:
        return cls(
            timeout_ms=settings.timeout_ms,
            max_retries=settings.max_retries,
            backoff_base_ms=settings.backoff_base_ms,
            backoff_max_ms=settings.backoff_max_ms,
            user_agent=settings.user_agent,
            verify_ssl=settings.verify_ssl,
        )


@dataclass(frozen=True)
class RequestDescriptor:
    """Requisição outbound imutável entregue ao executor.

    Attributes:
        method: GET, POST, PUT ou DELETE
        url: URL absoluta (https obrigatório)
        platform: Plataforma de destino (partição das métricas)
        headers: Headers do chamador (sanitizados pelo executor)
        body: Corpo opcional (str ou bytes)
        timeout_ms: Timeout por tentativa
        max_retries: Tentativas extras para falhas de transporte
    """

    method: HttpMethod
    url: str
    platform: Platform
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | bytes | None = None
    timeout_ms: int = 30_000
    max_retries: int = 3

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(str(self.method).upper()))
        object.__setattr__(self, "platform", Platform(self.platform))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))


@dataclass(frozen=True)
class HttpResponse:
    """Resposta consumida pelos adapters de plataforma."""

    status: int
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    encoding: str = "utf-8"

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.content.decode(self.encoding, errors="replace")

    def json(self) -> Any:
        """Decodifica o corpo como JSON.

        Raises:
            json.JSONDecodeError: Se o corpo não for JSON válido.
        """
        return json.loads(self.text())
