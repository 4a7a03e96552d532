# This file defines request and response schemas for the products resource.
# It exists so product payloads, the stock update body, and the owner summary are typed contracts.
# The owner is never part of the update schema, so it can only be set at creation time.
# Maintenance responses for the owner repair routine are also declared here.

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from src.api.schemas.common import CamelModel, PartialUpdateModel, RequestModel


class ProductCreate(RequestModel):
    name: str = Field(min_length=1, description="Product name", examples=["Gaming Laptop"])
    description: str = Field(
        min_length=1,
        description="Product description",
        examples=["High-performance gaming laptop with RGB keyboard"],
    )
    price: float = Field(
        ge=0, allow_inf_nan=False, description="Product price", examples=[1299.99]
    )
    stock: int = Field(default=0, ge=0, description="Available stock quantity", examples=[15])
    is_available: bool = Field(
        default=True, description="Whether the product is available for purchase"
    )
    categories: list[str] = Field(
        default_factory=list,
        description="Product categories",
        examples=[["electronics", "computers"]],
    )
    owner: str = Field(description="Owner user ID", examples=["6941c93806b8bd1830f6f353"])


class ProductUpdate(PartialUpdateModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    stock: int | None = Field(default=None, ge=0)
    is_available: bool | None = None
    categories: list[str] | None = None


class StockUpdate(RequestModel):
    quantity: int = Field(ge=0, description="New stock quantity", examples=[20])


class OwnerSummary(CamelModel):
    id: str
    name: str | None = None
    email: str | None = None


class ProductResponse(CamelModel):
    id: str
    name: str
    description: str
    price: float
    stock: int = 0
    is_available: bool = True
    categories: list[str] = Field(default_factory=list)
    owner: OwnerSummary | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OwnerTypeRow(CamelModel):
    id: str
    name: str | None = None
    owner: str | None = None
    owner_type: str


class OwnerMigrationResult(CamelModel):
    success: bool
    total: int
    migrated: int
    skipped: int
    failed: int
    message: str
