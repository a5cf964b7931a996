"""Protocolo de validação pré-voo de URLs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class UrlValidatorProtocol(Protocol):
    """Levanta InsecureUrlError/InvalidUrlError para URLs recusadas."""

    def assert_https_url(self, url: str) -> None: ...
