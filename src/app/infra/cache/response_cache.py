"""Cache de respostas em memória com TTL por entrada.

Capacidade fixa com despejo FIFO: quando cheio, remove a entrada inserida há
mais tempo. Leituras não alteram a ordem (não é LRU). Entradas expiradas são
removidas na leitura. Thread-safe.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100
DEFAULT_TTL_MS = 5 * 60 * 1000  # 5 minutos


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    inserted_at: float
    ttl_ms: float

    def is_expired(self, now: float) -> bool:
        return now - self.inserted_at > self.ttl_ms


def _now_ms() -> float:
    return time.monotonic() * 1000


class ResponseCache:
    """Armazena respostas por chave com TTL e capacidade limitada.

    Args:
        max_size: Número máximo de entradas.
        default_ttl_ms: TTL usado quando set() não recebe ttl_ms.
        clock: Relógio em milissegundos (injetável para testes).
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        default_ttl_ms: float = DEFAULT_TTL_MS,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size deve ser > 0")
        self._max_size = max_size
        self._default_ttl_ms = default_ttl_ms
        self._clock = clock or _now_ms
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        """Retorna o valor da chave ou `default` se ausente/expirado."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug(
                    "response_cache_expired",
                    extra={"component": "response_cache", "action": "get", "result": "expired"},
                )
                return default
            return entry.value

    def set(self, key: str, value: Any, ttl_ms: float | None = None) -> None:
        """Armazena o valor, despejando a entrada mais antiga se cheio.

        Regravar uma chave existente a move para a posição mais recente.
        """
        ttl = self._default_ttl_ms if ttl_ms is None else ttl_ms
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self._max_size:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug(
                    "response_cache_evicted",
                    extra={
                        "component": "response_cache",
                        "action": "set",
                        "result": "evicted",
                        "key": evicted_key,
                    },
                )
            self._entries[key] = CacheEntry(value=value, inserted_at=self._clock(), ttl_ms=ttl)

    def invalidate(self, key: str) -> bool:
        """Remove uma entrada específica. Retorna True se existia."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Limpa todo o cache."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(
            "response_cache_cleared",
            extra={
                "component": "response_cache",
                "action": "clear",
                "result": "ok",
                "items_cleared": count,
            },
        )

    def get_stats(self) -> dict[str, int]:
        """Tamanho atual e capacidade."""
        with self._lock:
            return {"size": len(self._entries), "max_size": self._max_size}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
