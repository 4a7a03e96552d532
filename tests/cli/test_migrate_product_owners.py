"""
Tests for the owner migration command-line script.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import json

import pytest
from bson import ObjectId

from scripts import migrate_product_owners
from scripts.migrate_product_owners import run
from tests.api.support import build_test_config, build_test_store


def test_dry_run_reports_owner_types(capsys: pytest.CaptureFixture[str]) -> None:
    config = build_test_config()
    store = build_test_store(config)
    store.collection("products").insert_one({"name": "Legacy", "owner": str(ObjectId())})

    exit_code = run(["--dry-run"], config=config, db=store)

    rows = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert rows[0]["ownerType"] == "string"
    assert store.collection("products").find_one({})["owner"].__class__ is str


def test_migration_exit_code_reflects_failures(capsys: pytest.CaptureFixture[str]) -> None:
    config = build_test_config()
    store = build_test_store(config)
    products = store.collection("products")
    products.insert_one({"name": "Legacy", "owner": str(ObjectId())})
    products.insert_one({"name": "Broken", "owner": "not-an-id"})

    exit_code = run([], config=config, db=store)

    summary = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert summary["migrated"] == 1
    assert summary["failed"] == 1


def test_run_closes_the_store_it_opened(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = build_test_config()
    store = build_test_store(config)
    closed: list[bool] = []
    monkeypatch.setattr(store, "close", lambda: closed.append(True))
    monkeypatch.setattr(migrate_product_owners, "DocumentStoreClient", lambda **_: store)

    exit_code = run([], config=config)

    capsys.readouterr()
    assert exit_code == 0
    assert closed == [True]


def test_run_leaves_an_injected_store_open(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    config = build_test_config()
    store = build_test_store(config)
    closed: list[bool] = []
    monkeypatch.setattr(store, "close", lambda: closed.append(True))

    run(["--dry-run"], config=config, db=store)

    capsys.readouterr()
    assert closed == []
