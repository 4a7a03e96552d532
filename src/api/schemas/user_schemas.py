# This file defines request and response schemas for the users resource.
# It exists so user payloads are validated once, at the boundary, before any store call.
# Emails are trimmed and lowercased here, which makes the uniqueness rule case-insensitive.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import EmailStr, Field, field_validator

from src.api.schemas.common import CamelModel, PartialUpdateModel, RequestModel


def _normalize_email(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserCreate(RequestModel):
    name: str = Field(min_length=1, description="Full name of the user", examples=["John Doe"])
    email: EmailStr = Field(description="User email address", examples=["john.doe@example.com"])
    age: int = Field(ge=0, le=150, description="Age of the user", examples=[30])
    is_active: bool = Field(default=True, description="Whether the user is active")
    tags: list[str] = Field(
        default_factory=list,
        description="Tags associated with the user",
        examples=[["developer", "python"]],
    )

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value: Any) -> Any:
        return _normalize_email(value)


class UserUpdate(PartialUpdateModel):
    name: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    is_active: bool | None = None
    tags: list[str] | None = None

    @field_validator("email", mode="before")
    @classmethod
    def lowercase_email(cls, value: Any) -> Any:
        return _normalize_email(value)


class UserResponse(CamelModel):
    id: str
    name: str
    email: str
    age: int | None = None
    is_active: bool = True
    tags: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
