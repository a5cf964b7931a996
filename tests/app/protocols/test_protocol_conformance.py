"""Implementações concretas satisfazem os contratos de app.protocols."""

from __future__ import annotations

from app.infra.http import HttpsUrlValidator, RequestExecutor, RequestLogger
from app.protocols import HttpClientProtocol, RequestLoggerProtocol, UrlValidatorProtocol


def test_executor_satisfies_http_client_protocol() -> None:
    assert isinstance(RequestExecutor(), HttpClientProtocol)


def test_request_logger_satisfies_protocol() -> None:
    assert isinstance(RequestLogger(), RequestLoggerProtocol)


def test_url_validator_satisfies_protocol() -> None:
    assert isinstance(HttpsUrlValidator(), UrlValidatorProtocol)


def test_plain_object_does_not_satisfy_protocols() -> None:
    assert not isinstance(object(), HttpClientProtocol)
    assert not isinstance(object(), UrlValidatorProtocol)
