"""Helpers for sanitizing user-supplied text before it is displayed.

Escaping is not idempotent: ``escape_html(escape_html("&"))`` yields
``"&amp;amp;"``. Apply it exactly once per render boundary.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_HTML_ENTITIES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}
_HTML_SPECIAL = re.compile(r"[&<>\"'/]")

_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9\-_.]")
_DOT_RUNS = re.compile(r"\.{2,}")
MAX_FILENAME_LENGTH = 255

_URL_FORBIDDEN = re.compile(r"[\x00-\x20\x7f]")
# Host names, or an IPv6 literal once urlsplit has stripped its brackets.
_HOSTNAME = re.compile(r"[\w\-.]+|[0-9A-Fa-f:.]+")


def escape_html(text: str) -> str:
    """Replace ``& < > " ' /`` with their HTML entities."""
    return _HTML_SPECIAL.sub(lambda m: _HTML_ENTITIES[m.group(0)], text)


def sanitize_input(value: object | None) -> str:
    """Trim and escape user input for display. ``None`` and ``""`` become ``""``."""
    if not value:
        return ""
    return escape_html(str(value).strip())


def sanitize_filename(filename: str) -> str:
    """Make a filename safe to store.

    Unsafe characters become ``_`` first, then dot runs collapse to a single
    dot, then the result is cut to 255 characters.
    """
    cleaned = _FILENAME_UNSAFE.sub("_", filename)
    cleaned = _DOT_RUNS.sub(".", cleaned)
    return cleaned[:MAX_FILENAME_LENGTH]


def is_valid_url(url: str) -> bool:
    """True only for absolute http(s) URLs with a well-formed host."""
    if not isinstance(url, str) or _URL_FORBIDDEN.search(url):
        return False
    try:
        parts = urlsplit(url)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if parts.scheme not in ("http", "https"):
        return False
    return bool(parts.hostname) and bool(_HOSTNAME.fullmatch(parts.hostname))
