# This file provides dependency factories for FastAPI routes and middleware.
# It exists so the document store client and services are created once and shared through injection.
# The setup keeps routers thin and makes endpoint tests easy to override.
# Centralized construction also ensures one consistent API configuration is used.

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.api.api_config import ApiConfig, get_api_config
from src.api.db_access import DocumentStoreClient
from src.api.services.product_service import ProductService
from src.api.services.user_service import UserService


def get_config() -> ApiConfig:
    return get_api_config()


@lru_cache(maxsize=1)
def get_database_client() -> DocumentStoreClient:
    config = get_api_config()
    return DocumentStoreClient(
        mongodb_uri=config.mongodb_uri,
        database_name=config.database_name,
        server_selection_timeout_ms=config.server_selection_timeout_ms,
    )


def get_user_service(
    config: Annotated[ApiConfig, Depends(get_config)],
    db: Annotated[DocumentStoreClient, Depends(get_database_client)],
) -> UserService:
    return UserService(config=config, db=db)


def get_product_service(
    config: Annotated[ApiConfig, Depends(get_config)],
    db: Annotated[DocumentStoreClient, Depends(get_database_client)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> ProductService:
    return ProductService(config=config, db=db, user_service=user_service)
