"""Configuração de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="message_mesh")
    logger = get_logger(__name__)
    logger.info("http_request_started", extra={"platform": "whatsapp"})

Campos obrigatórios em todo log:
- correlation_id
- service
- level
- logger
- message
- asctime

Tokens e segredos passados via `extra` são redigidos pelo SensitiveDataFilter.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import (
    REDACTED,
    CorrelationIdFilter,
    SensitiveDataFilter,
    is_sensitive_key,
    redact_mapping,
)
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REDACTED",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SensitiveDataFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "is_sensitive_key",
    "redact_mapping",
]
