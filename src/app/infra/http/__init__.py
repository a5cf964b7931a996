"""Pipeline HTTP outbound: validação, sanitização, timeout, retry e métricas."""

from app.infra.http.executor import RequestExecutor
from app.infra.http.headers import (
    DANGEROUS_HEADERS,
    MAX_HEADER_VALUE_LENGTH,
    build_request_headers,
    default_headers,
    sanitize_headers,
)
from app.infra.http.models import HttpClientConfig, HttpResponse, RequestDescriptor
from app.infra.http.request_logger import RequestLogger, mask_url
from app.infra.http.url_validator import HttpsUrlValidator, assert_https_url

__all__ = [
    "DANGEROUS_HEADERS",
    "MAX_HEADER_VALUE_LENGTH",
    "HttpClientConfig",
    "HttpResponse",
    "HttpsUrlValidator",
    "RequestDescriptor",
    "RequestExecutor",
    "RequestLogger",
    "assert_https_url",
    "build_request_headers",
    "default_headers",
    "mask_url",
    "sanitize_headers",
]
