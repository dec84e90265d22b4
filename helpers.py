"""
Shared helpers used across blueprints.
"""

from __future__ import annotations

import base64
from typing import Any, Optional

from flask import abort, jsonify, request

from validation import validate_id


def user_session() -> str:
    """Anonymous guest identity: client address plus user agent."""
    agent = request.headers.get("User-Agent") or "unknown"
    raw = f"{request.remote_addr}_{agent}"
    return base64.b64encode(raw.encode()).decode()


def require_id(raw: Any) -> int:
    """Parse a path id or abort with 400."""
    value = validate_id(raw)
    if value is None:
        abort(400, description="Invalid id")
    return value


def parse_bool_arg(name: str) -> Optional[bool]:
    """``?name=true`` / ``?name=false``; anything else means "not given"."""
    value = request.args.get(name)
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def json_body() -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        abort(400, description="Expected a JSON object body")
    return data


def json_error(message: str, status: int = 400, errors: Optional[list] = None, code: Optional[str] = None):
    """The error body every client of the API understands: ``{"message", "code"?, "errors"?}``."""
    body: dict[str, Any] = {"message": message}
    if code:
        body["code"] = code
    if errors:
        body["errors"] = errors
    return jsonify(body), status


def validation_error(field_errors: list) -> Any:
    return json_error("Invalid data", 400, errors=[e.to_dict() for e in field_errors])


# ── Pagination ──────────────────────────────────────────────

def paginated_response(items: list, total: int, page: int, limit: int) -> dict:
    """Standard pagination envelope."""
    return {
        "items": items,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": max(1, (total + limit - 1) // limit),
        },
    }
