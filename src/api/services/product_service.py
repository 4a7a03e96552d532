# This file implements the product management service behind the products routes.
# It exists so the owner reference check, stock rules, and owner joins live outside the routers.
# Owners are stored as ObjectIds; lookups by owner also match the legacy string representation.
# The owner repair routine is the only operation that counts failures instead of raising them.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection

from src.api.api_config import ApiConfig
from src.api.db_access import DocumentStoreClient
from src.api.error_handlers import NotFoundError, ValidationFailedError
from src.api.object_ids import is_valid_object_id, parse_object_id
from src.api.schemas.product_schemas import ProductCreate, ProductUpdate
from src.api.services.user_service import UserService
from src.common.logging import log_business_event, timed_operation

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 5
HIGH_STOCK_THRESHOLD = 100


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def owner_type_name(owner: Any) -> str:
    if isinstance(owner, ObjectId):
        return "objectId"
    if isinstance(owner, str):
        return "string"
    return type(owner).__name__


class ProductService:
    """Business rules and persistence for products."""

    def __init__(
        self,
        *,
        config: ApiConfig,
        db: DocumentStoreClient,
        user_service: UserService,
    ) -> None:
        self.config = config
        self.db = db
        self.user_service = user_service
        self.products: Collection = db.collection(config.products_collection_name)

    def create(self, payload: ProductCreate) -> dict[str, Any]:
        logger.info("Attempting to create product: %s", payload.name)

        if not is_valid_object_id(payload.owner):
            raise ValidationFailedError("Invalid owner ID format")
        owner_id = ObjectId(payload.owner)

        try:
            self.user_service.find_one(owner_id)
        except NotFoundError as exc:
            raise ValidationFailedError(f"Owner with ID {owner_id} does not exist") from exc

        document = payload.model_dump(by_alias=True)
        document["owner"] = owner_id
        now = _utc_now()
        document["createdAt"] = now
        document["updatedAt"] = now

        with timed_operation(logger, "products.insert_one"):
            result = self.products.insert_one(document)
        document["_id"] = result.inserted_id

        log_business_event(
            logger,
            "Product Created",
            productId=str(result.inserted_id),
            productName=document["name"],
            price=document["price"],
            stock=document["stock"],
            owner=str(owner_id),
        )
        return self._with_owners([document])[0]

    def find_all(self) -> list[dict[str, Any]]:
        return self._find({}, "products.find()")

    def find_one(self, product_id: ObjectId) -> dict[str, Any]:
        with timed_operation(logger, f"products.find_one({product_id})"):
            document = self.products.find_one({"_id": product_id})
        if document is None:
            raise NotFoundError(f"Product with ID {product_id} not found")
        return self._with_owners([document])[0]

    def find_by_owner(self, owner_id: str) -> list[dict[str, Any]]:
        logger.info("Fetching products by owner: %s", owner_id)
        owner_object_id = parse_object_id(owner_id, label="owner ID")
        query = {"$or": [{"owner": owner_object_id}, {"owner": str(owner_object_id)}]}
        return self._find(query, f"products.find({{owner: {owner_object_id}}})")

    def find_available(self) -> list[dict[str, Any]]:
        return self._find(
            {"isAvailable": True, "stock": {"$gt": 0}},
            "products.find({isAvailable: true, stock: {$gt: 0}})",
        )

    def find_by_category(self, category: str) -> list[dict[str, Any]]:
        return self._find({"categories": category}, f"products.find({{categories: {category!r}}})")

    def find_by_price_range(self, min_price: float, max_price: float) -> list[dict[str, Any]]:
        if min_price > max_price:
            raise ValidationFailedError("min must be less than or equal to max.")
        return self._find(
            {"price": {"$gte": min_price, "$lte": max_price}},
            f"products.find({{price: {{$gte: {min_price}, $lte: {max_price}}}}})",
        )

    def update(self, product_id: ObjectId, payload: ProductUpdate) -> dict[str, Any]:
        changes = payload.changes()
        updated_fields = sorted(changes)
        changes["updatedAt"] = _utc_now()

        with timed_operation(logger, f"products.find_one_and_update({product_id})"):
            document = self.products.find_one_and_update(
                {"_id": product_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if document is None:
            raise NotFoundError(f"Product with ID {product_id} not found")

        log_business_event(
            logger,
            "Product Updated",
            productId=str(product_id),
            productName=document.get("name"),
            updatedFields=updated_fields,
        )
        return self._with_owners([document])[0]

    def remove(self, product_id: ObjectId) -> None:
        with timed_operation(logger, f"products.find_one_and_delete({product_id})"):
            document = self.products.find_one_and_delete({"_id": product_id})
        if document is None:
            raise NotFoundError(f"Product with ID {product_id} not found")

        log_business_event(
            logger,
            "Product Deleted",
            productId=str(product_id),
            productName=document.get("name"),
            price=document.get("price"),
            owner=str(document.get("owner")),
        )

    def update_stock(self, product_id: ObjectId, quantity: int) -> dict[str, Any]:
        logger.info("Updating stock for product %s to %s units", product_id, quantity)

        with timed_operation(logger, f"products.find_one_and_update({product_id}, stock)"):
            previous = self.products.find_one_and_update(
                {"_id": product_id},
                {
                    "$set": {
                        "stock": quantity,
                        "isAvailable": quantity > 0,
                        "updatedAt": _utc_now(),
                    }
                },
                return_document=ReturnDocument.BEFORE,
            )
        if previous is None:
            raise NotFoundError(f"Product with ID {product_id} not found")

        name = previous.get("name")
        log_business_event(
            logger,
            "Stock Updated",
            productId=str(product_id),
            productName=name,
            oldStock=previous.get("stock"),
            newStock=quantity,
            oldAvailability=previous.get("isAvailable"),
            newAvailability=quantity > 0,
        )
        if quantity == 0:
            logger.warning("Product out of stock: %s (ID: %s)", name, product_id)
        elif quantity <= LOW_STOCK_THRESHOLD:
            logger.warning("Low stock alert: %s has only %s units left", name, quantity)
        elif quantity > HIGH_STOCK_THRESHOLD:
            logger.info("High stock level: %s has %s units", name, quantity)

        return self.find_one(product_id)

    def debug_owner_types(self) -> list[dict[str, Any]]:
        with timed_operation(logger, "products.find({}, {name, owner})"):
            documents = list(self.products.find({}, {"name": 1, "owner": 1}))

        rows = [
            {
                "id": str(doc["_id"]),
                "name": doc.get("name"),
                "owner": str(doc["owner"]) if doc.get("owner") is not None else None,
                "ownerType": owner_type_name(doc.get("owner")),
            }
            for doc in documents
        ]
        logger.info("Owner type check complete: %s products analyzed", len(rows))
        return rows

    def migrate_owners_to_object_id(self) -> dict[str, Any]:
        """Convert legacy string owners to ObjectIds, one record at a time.

        Records that already hold an ObjectId, or that another run converted
        first, are skipped. A record that cannot be converted is counted as
        failed and logged; the scan carries on with the remaining records.
        """

        logger.info("Starting owner migration")
        with timed_operation(logger, "products.find({}, {name, owner})"):
            documents = list(self.products.find({}, {"name": 1, "owner": 1}))

        migrated = 0
        skipped = 0
        failed = 0
        for doc in documents:
            owner = doc.get("owner")
            if not isinstance(owner, str):
                skipped += 1
                continue
            try:
                owner_id = parse_object_id(owner, label="owner ID")
                update = self.products.update_one(
                    {"_id": doc["_id"], "owner": owner},
                    {"$set": {"owner": owner_id}},
                )
            except Exception as exc:
                failed += 1
                logger.error("Failed to migrate product %s (ID: %s): %s", doc.get("name"), doc["_id"], exc)
                continue
            if not update.modified_count:
                skipped += 1
                logger.info("Owner of product %s (ID: %s) already converted", doc.get("name"), doc["_id"])
                continue
            migrated += 1
            logger.info("Migrated owner of product %s (ID: %s)", doc.get("name"), doc["_id"])

        result = {
            "success": failed == 0,
            "total": len(documents),
            "migrated": migrated,
            "skipped": skipped,
            "failed": failed,
            "message": (
                f"Migration complete: {migrated} migrated, {skipped} skipped, {failed} failed"
            ),
        }
        log_business_event(logger, "Owner Migration Completed", **result)
        return result

    def _find(self, query: dict[str, Any], label: str) -> list[dict[str, Any]]:
        with timed_operation(logger, label):
            documents = list(self.products.find(query))
        logger.info("Found %s products for %s", len(documents), label)
        return self._with_owners(documents)

    def _with_owners(self, documents: list[dict[str, Any]]) -> list[dict[str, Any]]:
        owner_ids = [
            self._owner_object_id(doc.get("owner"))
            for doc in documents
        ]
        summaries = self.user_service.find_summaries([oid for oid in owner_ids if oid is not None])

        rows: list[dict[str, Any]] = []
        for doc, owner_id in zip(documents, owner_ids):
            row = {key: value for key, value in doc.items() if key not in {"_id", "owner"}}
            row["id"] = str(doc["_id"])
            if owner_id is None:
                row["owner"] = None
            else:
                row["owner"] = summaries.get(
                    owner_id,
                    {"id": str(owner_id), "name": None, "email": None},
                )
            rows.append(row)
        return rows

    @staticmethod
    def _owner_object_id(owner: Any) -> ObjectId | None:
        if isinstance(owner, ObjectId):
            return owner
        if is_valid_object_id(owner):
            return ObjectId(owner)
        return None
