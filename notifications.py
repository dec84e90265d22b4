"""
User-facing notifications (toasts) and friendly error text.

Errors from the API are classified into a closed set of codes:
  1. the ``code`` field of the API error body, when present;
  2. the HTTP status (429 quota, 503 unavailable, 404 not found);
  3. substring matching on the message, for legacy errors without a code.
Only the analysis calls turn codes into friendly text; every other
mutation shows the raw message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from http_client import HttpError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Toast:
    title: str
    description: str = ""
    variant: str = "default"  # "default" | "destructive"


class Notifier(Protocol):
    def notify(self, toast: Toast) -> None: ...


class ToastLog:
    """Notifier that keeps every toast in memory and writes it to the log."""

    def __init__(self) -> None:
        self.toasts: list[Toast] = []

    def notify(self, toast: Toast) -> None:
        self.toasts.append(toast)
        level = logging.WARNING if toast.variant == "destructive" else logging.INFO
        logger.log(level, "TOAST [%s] %s: %s", toast.variant, toast.title, toast.description)

    @property
    def last(self) -> Toast | None:
        return self.toasts[-1] if self.toasts else None

    def clear(self) -> None:
        self.toasts.clear()


class ErrorCode(str, Enum):
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    MISSING_API_KEY = "MISSING_API_KEY"
    ANALYSIS_FAILED = "ANALYSIS_FAILED"
    NOT_FOUND = "NOT_FOUND"
    UNKNOWN = "UNKNOWN"


_STATUS_CODES = {
    429: ErrorCode.QUOTA_EXCEEDED,
    503: ErrorCode.SERVICE_UNAVAILABLE,
    404: ErrorCode.NOT_FOUND,
}

# Last resort for errors that carry neither a code nor a telling status.
_LEGACY_PATTERNS: list[tuple[tuple[str, ...], ErrorCode]] = [
    (("quota", "429", "rate limit"), ErrorCode.QUOTA_EXCEEDED),
    (("503", "unavailable"), ErrorCode.SERVICE_UNAVAILABLE),
    (("groq_api_key", "api_key", "api key"), ErrorCode.MISSING_API_KEY),
    (("failed to analyze", "failed to reanalyze"), ErrorCode.ANALYSIS_FAILED),
]

ANALYSIS_MESSAGES: dict[ErrorCode, str | None] = {
    ErrorCode.QUOTA_EXCEEDED:
        "AI služby jsou dočasně nedostupné. Analýza bude použita základní algoritmy místo AI.",
    ErrorCode.SERVICE_UNAVAILABLE:
        "AI služby jsou dočasně nedostupné. Analýza bude použita základní algoritmy místo AI.",
    ErrorCode.MISSING_API_KEY:
        "AI analýza používá základní algoritmy. Pro pokročilou AI analýzu je potřeba nakonfigurovat API klíče.",
    ErrorCode.ANALYSIS_FAILED:
        "Analýza byla dokončena pomocí základních algoritmů místo AI.",
    ErrorCode.NOT_FOUND: None,
    ErrorCode.UNKNOWN: None,
}

REANALYSIS_MESSAGES: dict[ErrorCode, str | None] = {
    ErrorCode.QUOTA_EXCEEDED:
        "AI služby jsou dočasně nedostupné. Byla použita základní analýza místo pokročilé AI.",
    ErrorCode.SERVICE_UNAVAILABLE:
        "AI služby jsou dočasně nedostupné. Byla použita základní analýza místo pokročilé AI.",
    ErrorCode.MISSING_API_KEY:
        "Používá se základní analýza. Pro pokročilé AI funkce je potřeba nakonfigurovat API klíče.",
    ErrorCode.ANALYSIS_FAILED:
        "Analýza byla dokončena pomocí základních algoritmů.",
    ErrorCode.NOT_FOUND: None,
    ErrorCode.UNKNOWN: None,
}


def error_message(exc: BaseException) -> str:
    if isinstance(exc, HttpError):
        return exc.message
    return str(exc)


def classify_error(exc: BaseException) -> ErrorCode:
    if isinstance(exc, HttpError):
        if exc.code:
            try:
                return ErrorCode(exc.code)
            except ValueError:
                logger.debug("Unrecognised API error code %r", exc.code)
        if exc.status in _STATUS_CODES:
            return _STATUS_CODES[exc.status]

    text = str(exc).lower()
    for patterns, code in _LEGACY_PATTERNS:
        if any(p in text for p in patterns):
            return code
    return ErrorCode.UNKNOWN


def describe_error(exc: BaseException, friendly: dict[ErrorCode, str | None] | None = None) -> str:
    """Text for an error toast: the friendly message for its code, else the raw message."""
    if friendly:
        text = friendly.get(classify_error(exc))
        if text:
            return text
    return error_message(exc)
