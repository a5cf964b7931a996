"""Bootstrap do SDK: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
cria o pipeline de requisições.

Uso:
    from app.bootstrap import create_pipeline, initialize_sdk

    initialize_sdk()
    pipeline = create_pipeline()
"""

from __future__ import annotations

import logging
import os

from app.bootstrap.pipeline import (
    MessagingPipeline,
    PerformanceAnalysis,
    PlatformAnalysis,
    create_pipeline,
)
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import get_http_settings

# Nome do serviço para logs e métricas
SERVICE_NAME = "message_mesh"

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_sdk() -> None:
    """Configura logging estruturado JSON com correlation_id.

    Deve ser chamada uma vez pelo processo que embarca o SDK.
    """
    configure_logging(
        level=get_http_settings().log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings do pipeline no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development`/`test` mantém alerta sem bloquear execução local.
    """
    environment = os.getenv("ENVIRONMENT", "development").lower()
    errors = [f"http: {error}" for error in get_http_settings().validate()]

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


__all__ = [
    "SERVICE_NAME",
    "MessagingPipeline",
    "PerformanceAnalysis",
    "PlatformAnalysis",
    "create_pipeline",
    "initialize_sdk",
    "validate_runtime_settings",
]
