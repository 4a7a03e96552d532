# This file provides shared helpers for API endpoint and service tests.
# It exists so tests run against an in-memory document store instead of a real MongoDB server.
# The helpers build consistent config objects, store clients, services, and scoped TestClient contexts.
# Centralized test wiring keeps API tests small and focused on behavior.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import mongomock
from fastapi.testclient import TestClient

from src.api.api_config import ApiConfig
from src.api.app import app
from src.api.db_access import DocumentStoreClient
from src.api.dependencies import get_config, get_database_client
from src.api.services.product_service import ProductService
from src.api.services.user_service import UserService


def build_test_config(*, enable_request_logging: bool = False) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Users and Products API",
        host="0.0.0.0",
        port=8000,
        environment="test",
        mongodb_uri="mongodb://localhost:27017/users_products_test",
        database_name="users_products_test",
        users_collection_name="users",
        products_collection_name="products",
        server_selection_timeout_ms=100,
        enable_request_logging=enable_request_logging,
        allowed_origins=[],
        app_version="0.1.0",
        docs_path="/docs",
    )


def build_test_store(config: ApiConfig | None = None) -> DocumentStoreClient:
    """Create a document store client backed by mongomock, with indexes in place."""

    resolved_config = config or build_test_config()
    store = DocumentStoreClient(
        mongodb_uri=resolved_config.mongodb_uri,
        database_name=resolved_config.database_name,
        client=mongomock.MongoClient(),
    )
    store.ensure_indexes(
        users_collection=resolved_config.users_collection_name,
        products_collection=resolved_config.products_collection_name,
    )
    return store


def build_services(
    config: ApiConfig, store: DocumentStoreClient
) -> tuple[UserService, ProductService]:
    user_service = UserService(config=config, db=store)
    product_service = ProductService(config=config, db=store, user_service=user_service)
    return user_service, product_service


class FakeDBClient:
    """Simple fake store dependency for health/readiness endpoint tests."""

    def __init__(self, *, connected: bool = True) -> None:
        self._connected = connected

    def can_connect(self) -> bool:
        return self._connected

    def ensure_indexes(self, **_: Any) -> None:
        return None


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    db_client: Any | None = None,
    raise_server_exceptions: bool = True,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_db = db_client if db_client is not None else build_test_store(resolved_config)

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_database_client] = lambda: resolved_db

    try:
        with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
