"""Testes do RequestLogger (logs sem segredos, nunca levanta)."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from app.infra.http.request_logger import RequestLogger, mask_url


class TestMaskUrl:
    """Testes para mask_url."""

    def test_masks_access_token_query(self) -> None:
        masked = mask_url("https://graph.facebook.com/me?access_token=EAAB123&fields=id")
        assert "EAAB123" not in masked
        assert "fields=id" in masked

    def test_url_without_query_unchanged(self) -> None:
        url = "https://graph.facebook.com/v24.0/123/messages"
        assert mask_url(url) == url


class TestRequestLogger:
    """Testes para RequestLogger."""

    def test_start_logs_debug_with_redacted_meta(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="app.infra.http.request_logger")
        RequestLogger().log_request_start(
            "whatsapp", "POST", "https://x.io/send", {"access_token": "secret", "timeout_ms": 10}
        )
        record = caplog.records[-1]
        assert record.getMessage() == "http_request_started"
        assert record.meta == {"access_token": "[REDACTED]", "timeout_ms": 10}

    def test_end_level_depends_on_success(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="app.infra.http.request_logger")
        request_logger = RequestLogger()
        request_logger.log_request_end("messenger", "GET", "https://x.io", 12.345, True)
        request_logger.log_request_end("messenger", "GET", "https://x.io", 10.0, False)

        ok, failed = caplog.records[-2:]
        assert (ok.levelno, ok.getMessage()) == (logging.INFO, "http_request_completed")
        assert ok.duration_ms == 12.35
        assert (failed.levelno, failed.getMessage()) == (logging.WARNING, "http_request_failed")

    def test_logging_failures_never_raise(self) -> None:
        broken = MagicMock(spec=logging.Logger)
        broken.debug.side_effect = RuntimeError("handler exploded")
        broken.log.side_effect = RuntimeError("handler exploded")
        request_logger = RequestLogger(broken)

        request_logger.log_request_start("instagram", "GET", "https://x.io")
        request_logger.log_request_end("instagram", "GET", "https://x.io", 1.0, True)
