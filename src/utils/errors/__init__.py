"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    HttpStatusError,
    InsecureUrlError,
    InvalidUrlError,
    MessagingError,
    NetworkError,
    RequestTimeoutError,
    UnknownRequestError,
)

__all__ = [
    "HttpStatusError",
    "InsecureUrlError",
    "InvalidUrlError",
    "MessagingError",
    "NetworkError",
    "RequestTimeoutError",
    "UnknownRequestError",
]
