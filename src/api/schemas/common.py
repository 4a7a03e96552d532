# This file defines shared schema pieces reused by multiple API endpoints.
# It exists so camelCase field naming and error payloads stay consistent across resources.
# Shared models reduce duplication and keep contract changes easier to review.
# These classes are also used by tests to validate response shape stability.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase JSON names while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    """Base for request bodies: unknown fields are rejected and strings are trimmed."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


class PartialUpdateModel(RequestModel):
    """Base for partial update bodies: fields may be omitted but never set to null."""

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> PartialUpdateModel:
        null_fields = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if null_fields:
            raise ValueError(f"Fields cannot be null: {', '.join(null_fields)}")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields present in the payload, keyed by their stored names."""

        return self.model_dump(exclude_unset=True, by_alias=True)


class ErrorResponse(CamelModel):
    status_code: int
    timestamp: datetime
    path: str
    message: str
    error_code: str
    request_id: str
    details: Any | None = None
