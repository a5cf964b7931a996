"""Enums de plataformas de mensageria e métodos HTTP suportados."""

from __future__ import annotations

from enum import StrEnum


class Platform(StrEnum):
    """Destinos de mensageria suportados (chave de partição das métricas)."""

    WHATSAPP = "whatsapp"
    MESSENGER = "messenger"
    INSTAGRAM = "instagram"


class HttpMethod(StrEnum):
    """Métodos HTTP aceitos pelo pipeline de requisições."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


ALL_PLATFORMS: tuple[Platform, ...] = tuple(Platform)
