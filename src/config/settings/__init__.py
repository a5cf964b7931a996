"""Agregador de settings do message-mesh.

Re-exporta as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.http import (
    DEFAULT_USER_AGENT,
    SDK_VERSION,
    HttpSettings,
    get_http_settings,
)

__all__ = [
    "DEFAULT_USER_AGENT",
    "SDK_VERSION",
    "HttpSettings",
    "get_http_settings",
]
