"""Protocolos HTTP consumidos pelos adapters de plataforma.

Evita dependência direta da implementação em app/infra/http.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.constants.platforms import Platform
    from app.infra.http.models import HttpResponse


@runtime_checkable
class HttpClientProtocol(Protocol):
    """Contrato mínimo do pipeline de requisições para os adapters."""

    async def get(
        self, url: str, headers: Mapping[str, str] | None, platform: Platform
    ) -> HttpResponse: ...

    async def post(
        self,
        url: str,
        body: str | bytes | None,
        headers: Mapping[str, str] | None,
        platform: Platform,
    ) -> HttpResponse: ...

    async def put(
        self,
        url: str,
        body: str | bytes | None,
        headers: Mapping[str, str] | None,
        platform: Platform,
    ) -> HttpResponse: ...

    async def delete(
        self, url: str, headers: Mapping[str, str] | None, platform: Platform
    ) -> HttpResponse: ...
