# This file defines the products endpoints, including the owner maintenance routes.
# It exists so HTTP binding stays separate from the product service rules.
# Fixed paths are registered before `/{id}` so they are never captured as identifiers.
# The maintenance routes expose the owner type diagnostics and the one-off owner repair.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from src.api.dependencies import get_product_service
from src.api.object_ids import ObjectIdPath
from src.api.openapi_docs import error_responses
from src.api.schemas.product_schemas import (
    OwnerMigrationResult,
    OwnerTypeRow,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    StockUpdate,
)
from src.api.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    responses=error_responses("product", 400),
)
def create_product(payload: ProductCreate, service: ProductServiceDep) -> dict[str, object]:
    return service.create(payload)


@router.get("", response_model=list[ProductResponse], summary="Get all products")
def list_products(service: ProductServiceDep) -> list[dict[str, object]]:
    return service.find_all()


@router.get(
    "/available",
    response_model=list[ProductResponse],
    summary="Get products that are available and in stock",
)
def list_available_products(service: ProductServiceDep) -> list[dict[str, object]]:
    return service.find_available()


@router.get(
    "/category/{category}",
    response_model=list[ProductResponse],
    summary="Get products in a category",
)
def list_products_by_category(category: str, service: ProductServiceDep) -> list[dict[str, object]]:
    return service.find_by_category(category)


@router.get(
    "/price-range",
    response_model=list[ProductResponse],
    summary="Get products within an inclusive price range",
    responses=error_responses("product", 400),
)
def list_products_by_price_range(
    service: ProductServiceDep,
    min_price: float = Query(alias="min", allow_inf_nan=False),
    max_price: float = Query(alias="max", allow_inf_nan=False),
) -> list[dict[str, object]]:
    return service.find_by_price_range(min_price, max_price)


@router.get(
    "/owner/{owner_id}",
    response_model=list[ProductResponse],
    summary="Get products owned by a user",
    responses=error_responses("product", 400),
)
def list_products_by_owner(owner_id: str, service: ProductServiceDep) -> list[dict[str, object]]:
    return service.find_by_owner(owner_id)


@router.get(
    "/debug/owners",
    response_model=list[OwnerTypeRow],
    tags=["maintenance"],
    summary="List how each product stores its owner",
)
def debug_product_owners(service: ProductServiceDep) -> list[dict[str, object]]:
    return service.debug_owner_types()


@router.post(
    "/migrate/owners",
    response_model=OwnerMigrationResult,
    status_code=status.HTTP_200_OK,
    tags=["maintenance"],
    summary="Convert legacy string owners to ObjectIds",
)
def migrate_product_owners(service: ProductServiceDep) -> dict[str, object]:
    return service.migrate_owners_to_object_id()


@router.get(
    "/{id}",
    response_model=ProductResponse,
    summary="Get a product by ID",
    responses=error_responses("product", 400, 404),
)
def get_product(product_id: ObjectIdPath, service: ProductServiceDep) -> dict[str, object]:
    return service.find_one(product_id)


@router.patch(
    "/{id}",
    response_model=ProductResponse,
    summary="Update a product",
    responses=error_responses("product", 400, 404),
)
def update_product(
    product_id: ObjectIdPath,
    payload: ProductUpdate,
    service: ProductServiceDep,
) -> dict[str, object]:
    return service.update(product_id, payload)


@router.patch(
    "/{id}/stock",
    response_model=ProductResponse,
    summary="Set the stock quantity of a product",
    responses=error_responses("product", 400, 404),
)
def update_product_stock(
    product_id: ObjectIdPath,
    payload: StockUpdate,
    service: ProductServiceDep,
) -> dict[str, object]:
    return service.update_stock(product_id, payload.quantity)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a product",
    responses=error_responses("product", 400, 404),
)
def delete_product(product_id: ObjectIdPath, service: ProductServiceDep) -> Response:
    service.remove(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
