"""Protocolos e contratos do pipeline de requisições."""

from .http_client import HttpClientProtocol
from .request_logger import RequestLoggerProtocol
from .url_validator import UrlValidatorProtocol

__all__ = [
    "HttpClientProtocol",
    "RequestLoggerProtocol",
    "UrlValidatorProtocol",
]
