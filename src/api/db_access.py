# This file wraps document store access so API services never build their own connections.
# It exists to keep pymongo connection details out of router code and make testing easier.
# The helper also centralizes connectivity checks and index creation for both collections.
# Keeping this layer small makes store behavior easier to audit and troubleshoot.

from __future__ import annotations

import logging
from typing import Any

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)


class DocumentStoreClient:
    """Minimal pymongo wrapper for API read/write access."""

    def __init__(
        self,
        *,
        mongodb_uri: str,
        database_name: str,
        server_selection_timeout_ms: int = 5000,
        client: Any | None = None,
    ) -> None:
        self._client: MongoClient = client or MongoClient(
            mongodb_uri,
            serverSelectionTimeoutMS=server_selection_timeout_ms,
            tz_aware=True,
        )
        self._database: Database = self._client[database_name]

    @property
    def database(self) -> Database:
        return self._database

    def collection(self, name: str) -> Collection:
        return self._database[name]

    def can_connect(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError:
            return False

    def ensure_indexes(self, *, users_collection: str, products_collection: str) -> None:
        users = self.collection(users_collection)
        users.create_index([("email", ASCENDING)], unique=True, name="email_unique")
        users.create_index([("isActive", ASCENDING)], name="is_active")

        products = self.collection(products_collection)
        for field_name, index_name in (
            ("name", "name"),
            ("owner", "owner"),
            ("isAvailable", "is_available"),
            ("price", "price"),
        ):
            products.create_index([(field_name, ASCENDING)], name=index_name)

        logger.info(
            "Indexes ensured for collections %s and %s",
            users_collection,
            products_collection,
        )

    def close(self) -> None:
        self._client.close()
