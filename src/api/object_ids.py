# This file handles parsing of store identifiers received in paths and payloads.
# It exists so every router rejects malformed ids the same way, before any store call.
# An invalid identifier format is a client error (400), never a missing record (404).

from __future__ import annotations

from typing import Annotated, Any

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, Path

from src.api.error_handlers import ValidationFailedError


def is_valid_object_id(value: Any) -> bool:
    if isinstance(value, ObjectId):
        return True
    if not isinstance(value, str):
        return False
    return ObjectId.is_valid(value) and len(value) == 24


def parse_object_id(value: Any, *, label: str = "ID") -> ObjectId:
    """Convert a 24-hex string into an ObjectId or raise a validation failure."""

    if isinstance(value, ObjectId):
        return value
    if not is_valid_object_id(value):
        raise ValidationFailedError(f"Invalid {label}: {value}")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise ValidationFailedError(f"Invalid {label}: {value}") from exc


def _object_id_from_path(id: str = Path(..., description="24-character hex identifier")) -> ObjectId:
    return parse_object_id(id, label="MongoDB ObjectId")


ObjectIdPath = Annotated[ObjectId, Depends(_object_id_from_path)]
