"""Settings do pipeline HTTP outbound.

Timeouts, política de retry, cache de respostas e histórico de métricas.
Valores em milissegundos para casar com os contratos do executor.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

SDK_VERSION: str = "0.1.0"
DEFAULT_USER_AGENT: str = f"message-mesh/{SDK_VERSION}"


@dataclass(frozen=True)
class HttpSettings:
    """Configurações do pipeline de requisições.

    Attributes:
        timeout_ms: Timeout por tentativa
        max_retries: Tentativas extras para falhas de transporte
        backoff_base_ms: Base do backoff exponencial
        backoff_max_ms: Teto do backoff
        user_agent: Valor do header User-Agent
        verify_ssl: Verificação de certificado TLS
        cache_max_size: Capacidade do cache de respostas
        cache_default_ttl_ms: TTL padrão das entradas do cache
        metrics_history_size: Máximo de registros mantidos no histórico
        log_level: Nível de log do SDK
    """

    # Timeouts e retries
    timeout_ms: int = 30_000
    max_retries: int = 3
    backoff_base_ms: int = 1_000
    backoff_max_ms: int = 10_000

    # Transporte
    user_agent: str = DEFAULT_USER_AGENT
    verify_ssl: bool = True

    # Cache e métricas
    cache_max_size: int = 100
    cache_default_ttl_ms: int = 5 * 60 * 1000  # 5 minutos
    metrics_history_size: int = 1_000

    log_level: str = "INFO"

    def validate(self) -> list[str]:
        """Valida configurações do pipeline.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.timeout_ms <= 0:
            errors.append("MESSAGE_MESH_TIMEOUT_MS deve ser > 0")

        if self.max_retries < 0:
            errors.append("MESSAGE_MESH_MAX_RETRIES deve ser >= 0")

        if self.backoff_base_ms < 0 or self.backoff_max_ms < 0:
            errors.append("MESSAGE_MESH_BACKOFF_* deve ser >= 0")

        if self.cache_max_size <= 0:
            errors.append("MESSAGE_MESH_CACHE_MAX_SIZE deve ser > 0")

        if self.metrics_history_size <= 0:
            errors.append("MESSAGE_MESH_METRICS_HISTORY_SIZE deve ser > 0")

        if not self.user_agent:
            errors.append("MESSAGE_MESH_USER_AGENT não pode ser vazio")

        return errors


def _load_from_env() -> HttpSettings:
    """Carrega HttpSettings a partir de variáveis de ambiente."""
    return HttpSettings(
        timeout_ms=int(os.getenv("MESSAGE_MESH_TIMEOUT_MS", "30000")),
        max_retries=int(os.getenv("MESSAGE_MESH_MAX_RETRIES", "3")),
        backoff_base_ms=int(os.getenv("MESSAGE_MESH_BACKOFF_BASE_MS", "1000")),
        backoff_max_ms=int(os.getenv("MESSAGE_MESH_BACKOFF_MAX_MS", "10000")),
        user_agent=os.getenv("MESSAGE_MESH_USER_AGENT", DEFAULT_USER_AGENT),
        verify_ssl=os.getenv("MESSAGE_MESH_VERIFY_SSL", "true").lower() in ("true", "1", "yes"),
        cache_max_size=int(os.getenv("MESSAGE_MESH_CACHE_MAX_SIZE", "100")),
        cache_default_ttl_ms=int(
            os.getenv("MESSAGE_MESH_CACHE_TTL_MS", str(5 * 60 * 1000))
        ),
        metrics_history_size=int(
            os.getenv("MESSAGE_MESH_METRICS_HISTORY_SIZE", "1000")
        ),
        log_level=os.getenv("MESSAGE_MESH_LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_http_settings() -> HttpSettings:
    """Retorna instância cacheada de HttpSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
