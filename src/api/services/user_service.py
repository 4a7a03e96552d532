# This file implements the user management service behind the users routes.
# It exists so routers stay transport-focused while store queries and business rules live in one layer.
# Email uniqueness is enforced both by a lookup and by the unique index, and surfaces as a conflict.
# Each operation raises typed failures that the error handlers map to status codes.

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from src.api.api_config import ApiConfig
from src.api.db_access import DocumentStoreClient
from src.api.error_handlers import ConflictError, NotFoundError
from src.api.schemas.user_schemas import UserCreate, UserUpdate
from src.common.logging import log_business_event, timed_operation

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "Email already exists"


def serialize_user(document: dict[str, Any]) -> dict[str, Any]:
    """Shape a stored user document into the API representation."""

    row = {key: value for key, value in document.items() if key != "_id"}
    row["id"] = str(document["_id"])
    return row


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


class UserService:
    """Business rules and persistence for users."""

    def __init__(self, *, config: ApiConfig, db: DocumentStoreClient) -> None:
        self.config = config
        self.db = db
        self.users: Collection = db.collection(config.users_collection_name)

    def create(self, payload: UserCreate) -> dict[str, Any]:
        document = payload.model_dump(by_alias=True)
        if self._email_taken(document["email"]):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        now = _utc_now()
        document["createdAt"] = now
        document["updatedAt"] = now
        try:
            with timed_operation(logger, "users.insert_one", expected=(DuplicateKeyError,)):
                result = self.users.insert_one(document)
        except DuplicateKeyError as exc:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc

        document["_id"] = result.inserted_id
        log_business_event(
            logger,
            "User Created",
            userId=str(result.inserted_id),
            email=document["email"],
        )
        return serialize_user(document)

    def find_all(self) -> list[dict[str, Any]]:
        with timed_operation(logger, "users.find()"):
            users = [serialize_user(doc) for doc in self.users.find()]
        logger.info("Found %s users", len(users))
        return users

    def find_active(self) -> list[dict[str, Any]]:
        with timed_operation(logger, "users.find({isActive: true})"):
            users = [serialize_user(doc) for doc in self.users.find({"isActive": True})]
        logger.info("Found %s active users", len(users))
        return users

    def find_one(self, user_id: ObjectId) -> dict[str, Any]:
        with timed_operation(logger, f"users.find_one({user_id})"):
            document = self.users.find_one({"_id": user_id})
        if document is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return serialize_user(document)

    def find_by_email(self, email: str) -> dict[str, Any] | None:
        normalized = email.strip().lower()
        logger.debug("Finding user by email: %s", normalized)
        with timed_operation(logger, "users.find_one({email})"):
            document = self.users.find_one({"email": normalized})
        return serialize_user(document) if document is not None else None

    def find_summaries(self, user_ids: list[ObjectId]) -> dict[ObjectId, dict[str, Any]]:
        """Return the name/email projection of the given users keyed by id."""

        if not user_ids:
            return {}
        with timed_operation(logger, "users.find({_id: {$in}}, {name, email})"):
            cursor = self.users.find(
                {"_id": {"$in": list(set(user_ids))}},
                {"name": 1, "email": 1},
            )
            return {
                doc["_id"]: {
                    "id": str(doc["_id"]),
                    "name": doc.get("name"),
                    "email": doc.get("email"),
                }
                for doc in cursor
            }

    def update(self, user_id: ObjectId, payload: UserUpdate) -> dict[str, Any]:
        changes = payload.changes()
        if "email" in changes and self._email_taken(changes["email"], exclude_id=user_id):
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        changes["updatedAt"] = _utc_now()
        try:
            with timed_operation(
                logger, f"users.find_one_and_update({user_id})", expected=(DuplicateKeyError,)
            ):
                document = self.users.find_one_and_update(
                    {"_id": user_id},
                    {"$set": changes},
                    return_document=ReturnDocument.AFTER,
                )
        except DuplicateKeyError as exc:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE) from exc

        if document is None:
            raise NotFoundError(f"User with ID {user_id} not found")

        log_business_event(
            logger,
            "User Updated",
            userId=str(user_id),
            updatedFields=sorted(key for key in changes if key != "updatedAt"),
        )
        return serialize_user(document)

    def remove(self, user_id: ObjectId) -> None:
        with timed_operation(logger, f"users.find_one_and_delete({user_id})"):
            document = self.users.find_one_and_delete({"_id": user_id})
        if document is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        log_business_event(logger, "User Deleted", userId=str(user_id), email=document.get("email"))

    def _email_taken(self, email: str, *, exclude_id: ObjectId | None = None) -> bool:
        query: dict[str, Any] = {"email": email}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id}
        return self.users.find_one(query, {"_id": 1}) is not None
