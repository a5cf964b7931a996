"""Formatters de logging estruturado.

Define o formatter JSON com campos obrigatórios:
- correlation_id
- service
- timestamp (asctime)
- level
- logger (name)
- message
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado (ordem estável no output)
REQUIRED_LOG_FIELDS: tuple[str, ...] = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Campos passados via `extra` (platform, method, duration_ms...) são
    anexados ao objeto JSON pelo próprio JsonFormatter.

    Exemplo de output:
        {
            "asctime": "2026-02-02T10:30:00",
            "level": "INFO",
            "logger": "app.infra.http.request_logger",
            "message": "http_request_completed",
            "correlation_id": "abc-123",
            "service": "message_mesh",
            "platform": "whatsapp",
            "duration_ms": 182.4
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )
