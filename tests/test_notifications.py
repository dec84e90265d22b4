"""Tests for notifications.py: toasts and error classification."""

from __future__ import annotations

import pytest

from http_client import HttpError, NotFoundError
from notifications import (
    ANALYSIS_MESSAGES,
    REANALYSIS_MESSAGES,
    ErrorCode,
    Toast,
    ToastLog,
    classify_error,
    describe_error,
    error_message,
)


class TestToastLog:
    def test_collects_in_order(self):
        log = ToastLog()
        log.notify(Toast("Úspěch!", "Fotky byly úspěšně nahrány"))
        log.notify(Toast("Chyba při mazání", "boom", "destructive"))
        assert [t.title for t in log.toasts] == ["Úspěch!", "Chyba při mazání"]
        assert log.last.variant == "destructive"

    def test_clear(self):
        log = ToastLog()
        log.notify(Toast("x"))
        log.clear()
        assert log.last is None


class TestClassifyError:
    def test_api_code_wins(self):
        err = HttpError(500, "whatever", code="MISSING_API_KEY")
        assert classify_error(err) is ErrorCode.MISSING_API_KEY

    def test_unknown_code_falls_through_to_status(self):
        err = HttpError(429, "Too Many Requests", code="SOMETHING_NEW")
        assert classify_error(err) is ErrorCode.QUOTA_EXCEEDED

    @pytest.mark.parametrize("status,expected", [
        (429, ErrorCode.QUOTA_EXCEEDED),
        (503, ErrorCode.SERVICE_UNAVAILABLE),
        (404, ErrorCode.NOT_FOUND),
    ])
    def test_status(self, status, expected):
        assert classify_error(HttpError(status, "x")) is expected

    @pytest.mark.parametrize("message,expected", [
        ("Gemini quota exhausted", ErrorCode.QUOTA_EXCEEDED),
        ("Rate limit reached", ErrorCode.QUOTA_EXCEEDED),
        ("model unavailable", ErrorCode.SERVICE_UNAVAILABLE),
        ("GROQ_API_KEY is not set", ErrorCode.MISSING_API_KEY),
        ("Failed to analyze photo", ErrorCode.ANALYSIS_FAILED),
        ("disk full", ErrorCode.UNKNOWN),
    ])
    def test_legacy_substrings(self, message, expected):
        assert classify_error(HttpError(500, message)) is expected
        assert classify_error(RuntimeError(message)) is expected


class TestDescribeError:
    def test_raw_message_without_friendly_table(self):
        assert describe_error(HttpError(500, "Failed to delete song")) == "Failed to delete song"
        assert error_message(ValueError("bad")) == "bad"

    def test_friendly_text_for_recognised_code(self):
        err = HttpError(503, "Service Unavailable")
        assert describe_error(err, ANALYSIS_MESSAGES) == ANALYSIS_MESSAGES[ErrorCode.SERVICE_UNAVAILABLE]
        assert describe_error(err, REANALYSIS_MESSAGES).startswith("AI služby jsou dočasně nedostupné")

    def test_unrecognised_code_keeps_raw_message(self):
        err = NotFoundError(404, "Photo not found")
        assert describe_error(err, ANALYSIS_MESSAGES) == "Photo not found"
