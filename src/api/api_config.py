# This file defines runtime settings for the API layer in one place.
# It exists so document store names, CORS, and request logging can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# It also validates the connection string and collection names before anything touches the store.

from __future__ import annotations

import os
import re
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
_MONGODB_URI_PREFIXES = ("mongodb://", "mongodb+srv://")


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Users and Products API"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    mongodb_uri: str
    database_name: str = "users_products"
    users_collection_name: str = "users"
    products_collection_name: str = "products"
    server_selection_timeout_ms: int = 5000
    enable_request_logging: bool = True
    allowed_origins: list[str] = Field(default_factory=list)
    app_version: str = "0.1.0"
    docs_path: str = "/docs"

    @field_validator("mongodb_uri")
    @classmethod
    def validate_mongodb_uri(cls, value: str) -> str:
        if not value.startswith(_MONGODB_URI_PREFIXES):
            raise ValueError("mongodb_uri must start with 'mongodb://' or 'mongodb+srv://'.")
        return value

    @field_validator("database_name", "users_collection_name", "products_collection_name")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"Unsafe collection or database name: {value!r}")
        return value

    @field_validator("port", "server_selection_timeout_ms")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @field_validator("docs_path")
    @classmethod
    def validate_docs_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("docs_path must start with '/'.")
        return value.rstrip("/") or "/docs"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Users and Products API"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 8000),
        "environment": os.getenv("ENV", "local"),
        "mongodb_uri": os.getenv("MONGODB_URI", ""),
        "database_name": os.getenv("DATABASE_NAME", "users_products"),
        "users_collection_name": os.getenv("API_USERS_COLLECTION_NAME", "users"),
        "products_collection_name": os.getenv("API_PRODUCTS_COLLECTION_NAME", "products"),
        "server_selection_timeout_ms": _env_int("API_SERVER_SELECTION_TIMEOUT_MS", 5000),
        "enable_request_logging": _env_bool("API_ENABLE_REQUEST_LOGGING", True),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
        "docs_path": os.getenv("API_DOCS_PATH", "/docs"),
    }
    if not config_values["mongodb_uri"]:
        raise RuntimeError("MONGODB_URI is required for API startup.")

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
