"""Validação pré-voo de URLs outbound.

Somente URLs https absolutas seguem para a rede. Falhas aqui não são
retentadas e não geram registro de métricas.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from utils.errors import InsecureUrlError, InvalidUrlError

SECURE_SCHEME = "https"


def assert_https_url(url: str) -> None:
    """Garante que a URL é https e bem formada.

    Raises:
        InvalidUrlError: URL vazia, sem esquema, sem host ou malformada.
        InsecureUrlError: Esquema diferente de https.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrlError("Invalid URL format provided")

    try:
        parts = urlsplit(url.strip())
        # Acessar port valida porta numérica; pode levantar ValueError
        _ = parts.port
    except ValueError as exc:
        raise InvalidUrlError("Invalid URL format provided", cause=exc) from exc

    if not parts.scheme:
        raise InvalidUrlError("Invalid URL format provided")

    if parts.scheme.lower() != SECURE_SCHEME:
        raise InsecureUrlError("All API calls must use HTTPS for security")

    if not parts.hostname:
        raise InvalidUrlError("Invalid URL format provided")


class HttpsUrlValidator:
    """Implementação padrão de UrlValidatorProtocol."""

    def assert_https_url(self, url: str) -> None:
        assert_https_url(url)
