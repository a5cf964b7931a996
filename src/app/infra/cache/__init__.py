"""Cache de respostas do pipeline outbound."""

from app.infra.cache.response_cache import (
    DEFAULT_MAX_SIZE,
    DEFAULT_TTL_MS,
    CacheEntry,
    ResponseCache,
)

__all__ = [
    "DEFAULT_MAX_SIZE",
    "DEFAULT_TTL_MS",
    "CacheEntry",
    "ResponseCache",
]
