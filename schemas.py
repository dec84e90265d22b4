"""Typed request structs for metadata, schedule and wedding-detail writes.

Each struct is built from a JSON body with ``from_json()`` (values are kept
as received), checked with ``validate()`` which returns a list of
``FieldError`` (empty when valid), and serialised with ``to_payload()`` into
the camelCase body the API expects. Update structs treat ``None`` as "not
provided".
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

META_TYPES = ("string", "number", "boolean", "json")


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class RequestValidationError(ValueError):
    """Raised client side when a request struct fails validation before sending."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in errors))


def ensure_valid(request: Any) -> dict[str, Any]:
    """Return the request's payload, or raise RequestValidationError."""
    errors = request.validate()
    if errors:
        raise RequestValidationError(errors)
    return request.to_payload()


# ── field checks ───────────────────────────────────────────

def _check_string(errors: list[FieldError], name: str, value: Any, *,
                  required: bool = False, min_length: int = 0,
                  max_length: int | None = None) -> None:
    if value is None:
        if required:
            errors.append(FieldError(name, "Required"))
        return
    if not isinstance(value, str):
        errors.append(FieldError(name, "Expected string"))
        return
    if len(value) < min_length:
        errors.append(FieldError(name, f"Must contain at least {min_length} character(s)"))
    if max_length is not None and len(value) > max_length:
        errors.append(FieldError(name, f"Must contain at most {max_length} character(s)"))


def _check_bool(errors: list[FieldError], name: str, value: Any) -> None:
    if value is not None and not isinstance(value, bool):
        errors.append(FieldError(name, "Expected boolean"))


def _check_int(errors: list[FieldError], name: str, value: Any, *, required: bool = False) -> None:
    if value is None:
        if required:
            errors.append(FieldError(name, "Required"))
        return
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(FieldError(name, "Expected integer"))


def _check_meta_value(errors: list[FieldError], meta_type: Any, meta_value: Any) -> None:
    """Check that a string value can be read as its declared meta type."""
    if not isinstance(meta_value, str) or meta_type not in META_TYPES:
        return
    if meta_type == "number":
        try:
            float(meta_value)
        except ValueError:
            errors.append(FieldError("metaValue", "Not a number"))
    elif meta_type == "boolean":
        if meta_value.lower() not in ("true", "false"):
            errors.append(FieldError("metaValue", "Expected 'true' or 'false'"))
    elif meta_type == "json":
        try:
            json.loads(meta_value)
        except ValueError:
            errors.append(FieldError("metaValue", "Invalid JSON"))


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


# ── metadata ───────────────────────────────────────────────

@dataclass
class CreateMetadataRequest:
    meta_key: Any
    meta_value: Any = None
    meta_type: Any = "string"
    description: Any = None
    category: Any = "general"
    is_editable: Any = True

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> CreateMetadataRequest:
        return cls(
            meta_key=data.get("metaKey"),
            meta_value=data.get("metaValue"),
            meta_type=data.get("metaType", "string"),
            description=data.get("description"),
            category=data.get("category", "general"),
            is_editable=data.get("isEditable", True),
        )

    def validate(self) -> list[FieldError]:
        errors: list[FieldError] = []
        _check_string(errors, "metaKey", self.meta_key, required=True, min_length=1, max_length=255)
        _check_string(errors, "metaValue", self.meta_value)
        if self.meta_type not in META_TYPES:
            errors.append(FieldError("metaType", f"Must be one of: {', '.join(META_TYPES)}"))
        _check_string(errors, "description", self.description)
        _check_string(errors, "category", self.category, max_length=100)
        _check_bool(errors, "isEditable", self.is_editable)
        _check_meta_value(errors, self.meta_type, self.meta_value)
        return errors

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "metaKey": self.meta_key,
            "metaValue": self.meta_value,
            "metaType": self.meta_type,
            "description": self.description,
            "category": self.category,
            "isEditable": self.is_editable,
        })


@dataclass
class UpdateMetadataRequest:
    meta_key: Any = None
    meta_value: Any = None
    meta_type: Any = None
    description: Any = None
    category: Any = None
    is_editable: Any = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> UpdateMetadataRequest:
        return cls(
            meta_key=data.get("metaKey"),
            meta_value=data.get("metaValue"),
            meta_type=data.get("metaType"),
            description=data.get("description"),
            category=data.get("category"),
            is_editable=data.get("isEditable"),
        )

    def validate(self) -> list[FieldError]:
        errors: list[FieldError] = []
        _check_string(errors, "metaKey", self.meta_key, min_length=1, max_length=255)
        _check_string(errors, "metaValue", self.meta_value)
        if self.meta_type is not None and self.meta_type not in META_TYPES:
            errors.append(FieldError("metaType", f"Must be one of: {', '.join(META_TYPES)}"))
        _check_string(errors, "description", self.description)
        _check_string(errors, "category", self.category, max_length=100)
        _check_bool(errors, "isEditable", self.is_editable)
        _check_meta_value(errors, self.meta_type, self.meta_value)
        return errors

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "metaKey": self.meta_key,
            "metaValue": self.meta_value,
            "metaType": self.meta_type,
            "description": self.description,
            "category": self.category,
            "isEditable": self.is_editable,
        })


# ── schedule ───────────────────────────────────────────────

@dataclass
class ScheduleItemRequest:
    time: Any
    title: Any
    order_index: Any
    description: Any = None
    is_active: Any = True

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ScheduleItemRequest:
        return cls(
            time=data.get("time"),
            title=data.get("title"),
            order_index=data.get("orderIndex"),
            description=data.get("description"),
            is_active=data.get("isActive", True),
        )

    def validate(self) -> list[FieldError]:
        errors: list[FieldError] = []
        _check_string(errors, "time", self.time, required=True, min_length=1, max_length=10)
        _check_string(errors, "title", self.title, required=True, min_length=1, max_length=255)
        _check_int(errors, "orderIndex", self.order_index, required=True)
        _check_string(errors, "description", self.description)
        _check_bool(errors, "isActive", self.is_active)
        return errors

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "time": self.time,
            "title": self.title,
            "orderIndex": self.order_index,
            "description": self.description,
            "isActive": self.is_active,
        })


@dataclass
class ScheduleItemUpdate:
    time: Any = None
    title: Any = None
    order_index: Any = None
    description: Any = None
    is_active: Any = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ScheduleItemUpdate:
        return cls(
            time=data.get("time"),
            title=data.get("title"),
            order_index=data.get("orderIndex"),
            description=data.get("description"),
            is_active=data.get("isActive"),
        )

    def validate(self) -> list[FieldError]:
        errors: list[FieldError] = []
        _check_string(errors, "time", self.time, min_length=1, max_length=10)
        _check_string(errors, "title", self.title, min_length=1, max_length=255)
        _check_int(errors, "orderIndex", self.order_index)
        _check_string(errors, "description", self.description)
        _check_bool(errors, "isActive", self.is_active)
        return errors

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "time": self.time,
            "title": self.title,
            "orderIndex": self.order_index,
            "description": self.description,
            "isActive": self.is_active,
        })


# ── wedding details ────────────────────────────────────────

@dataclass
class WeddingDetailsUpdate:
    couple_names: Any = None
    wedding_date: Any = None
    venue: Any = None
    venue_address: Any = None
    allow_uploads: Any = None
    moderate_uploads: Any = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> WeddingDetailsUpdate:
        return cls(
            couple_names=data.get("coupleNames"),
            wedding_date=data.get("weddingDate"),
            venue=data.get("venue"),
            venue_address=data.get("venueAddress"),
            allow_uploads=data.get("allowUploads"),
            moderate_uploads=data.get("moderateUploads"),
        )

    def validate(self) -> list[FieldError]:
        errors: list[FieldError] = []
        _check_string(errors, "coupleNames", self.couple_names, min_length=1, max_length=255)
        _check_string(errors, "venue", self.venue, min_length=1, max_length=255)
        _check_string(errors, "venueAddress", self.venue_address)
        _check_bool(errors, "allowUploads", self.allow_uploads)
        _check_bool(errors, "moderateUploads", self.moderate_uploads)
        if self.wedding_date is not None:
            if not isinstance(self.wedding_date, str) or _parse_date(self.wedding_date) is None:
                errors.append(FieldError("weddingDate", "Invalid date"))
        return errors

    def to_payload(self) -> dict[str, Any]:
        return _compact({
            "coupleNames": self.couple_names,
            "weddingDate": self.wedding_date,
            "venue": self.venue,
            "venueAddress": self.venue_address,
            "allowUploads": self.allow_uploads,
            "moderateUploads": self.moderate_uploads,
        })


def _parse_date(value: str) -> Optional[datetime]:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
