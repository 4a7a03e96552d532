"""
Unit tests for the API configuration loader.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

import pytest
from pydantic import ValidationError

from src.api.api_config import ApiConfig, load_api_config


def test_load_api_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_USERS_COLLECTION_NAME", "people")
    monkeypatch.setenv("API_ALLOWED_ORIGINS", "http://a.example, http://b.example")
    monkeypatch.setenv("API_ENABLE_REQUEST_LOGGING", "no")

    config = load_api_config(load_env=False)

    assert config.users_collection_name == "people"
    assert config.products_collection_name == "products"
    assert config.allowed_origins == ["http://a.example", "http://b.example"]
    assert config.enable_request_logging is False


def test_load_api_config_requires_mongodb_uri(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MONGODB_URI", raising=False)
    with pytest.raises(RuntimeError, match="MONGODB_URI is required"):
        load_api_config(load_env=False)


def test_rejects_non_mongodb_uri() -> None:
    with pytest.raises(ValidationError):
        ApiConfig(mongodb_uri="postgresql://localhost/db")


def test_rejects_unsafe_collection_name() -> None:
    with pytest.raises(ValidationError):
        ApiConfig(mongodb_uri="mongodb://localhost", products_collection_name="products; drop")


def test_rejects_bad_boolean(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_ENABLE_REQUEST_LOGGING", "sometimes")
    with pytest.raises(ValueError, match="boolean-like"):
        load_api_config(load_env=False)
