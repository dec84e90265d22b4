"""Input validation utilities for the server-side persistence boundary."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp")
ALLOWED_IMAGE_EXTENSIONS = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12
MAX_LIMIT = 100

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class UploadedFile:
    """Metadata of an uploaded file, independent of the web framework."""

    filename: str
    mimetype: str
    size: int


def describe_upload(file_storage) -> UploadedFile:
    """Build an UploadedFile from a werkzeug FileStorage, measuring its size."""
    stream = file_storage.stream
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(0)
    return UploadedFile(
        filename=file_storage.filename or "",
        mimetype=file_storage.mimetype or "",
        size=size,
    )


def validate_image_file(file: UploadedFile | None) -> ValidationResult:
    """Check an uploaded image. The first failing check decides the error."""
    if not file:
        return ValidationResult(False, "No file provided")

    if file.mimetype not in ALLOWED_IMAGE_TYPES:
        return ValidationResult(False, "Invalid file type. Only JPEG, PNG, GIF, and WEBP are allowed.")

    # Checked independently of the MIME type: a .exe labelled image/png is rejected.
    if not ALLOWED_IMAGE_EXTENSIONS.search(file.filename or ""):
        return ValidationResult(False, "Invalid file extension")

    if file.size > MAX_FILE_SIZE:
        return ValidationResult(
            False, f"File too large. Maximum size is {MAX_FILE_SIZE // 1024 // 1024}MB"
        )

    return ValidationResult(True)


def sanitize_string(value: str | None, max_length: int = 255) -> str:
    """Trim, strip ASCII control characters and truncate for storage."""
    if not value:
        return ""
    return _CONTROL_CHARS.sub("", value.strip())[:max_length]


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _coerce_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def validate_pagination(page: Any = None, limit: Any = None) -> dict[str, int]:
    """Coerce page/limit into bounds. Never fails; bad input falls back to defaults.

    Missing or non-numeric values take the defaults (page 1, limit 12).
    Numbers are rounded half up, page is floored at 1, limit clamped to [1, 100].
    """
    page_num = _coerce_number(page)
    limit_num = _coerce_number(limit)

    valid_page = max(1, _round_half_up(page_num or DEFAULT_PAGE))
    if limit_num is None:
        limit_num = DEFAULT_LIMIT
    valid_limit = min(MAX_LIMIT, max(1, _round_half_up(limit_num)))
    return {"page": valid_page, "limit": valid_limit}


def validate_id(value: Any) -> int | None:
    """Parse a positive integer id. Returns None for non-numeric or < 1."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 1 else None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    parsed = int(match.group(1))
    return parsed if parsed >= 1 else None
