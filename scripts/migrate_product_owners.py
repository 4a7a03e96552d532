#!/usr/bin/env python3
"""
Repair legacy product owners stored as plain strings.
It runs the same owner migration as `POST /products/migrate/owners` without starting the API.
Use `--dry-run` to print how each product stores its owner; the exit code is non-zero if any record failed.
"""

# ruff: noqa: E402

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.api.api_config import ApiConfig, get_api_config
from src.api.db_access import DocumentStoreClient
from src.api.services.product_service import ProductService
from src.api.services.user_service import UserService
from src.common.logging import configure_logging


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert string product owners to ObjectIds")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report the stored owner type of every product.",
    )
    return parser.parse_args(argv)


def build_product_service(config: ApiConfig, db: DocumentStoreClient) -> ProductService:
    user_service = UserService(config=config, db=db)
    return ProductService(config=config, db=db, user_service=user_service)


def run(
    argv: Sequence[str] | None = None,
    *,
    config: ApiConfig | None = None,
    db: DocumentStoreClient | None = None,
) -> int:
    args = parse_args(argv)
    resolved_config = config or get_api_config()
    resolved_db = db or DocumentStoreClient(
        mongodb_uri=resolved_config.mongodb_uri,
        database_name=resolved_config.database_name,
        server_selection_timeout_ms=resolved_config.server_selection_timeout_ms,
    )
    service = build_product_service(resolved_config, resolved_db)

    try:
        if args.dry_run:
            print(json.dumps(service.debug_owner_types(), indent=2))
            return 0

        result = service.migrate_owners_to_object_id()
        print(json.dumps(result, indent=2))
        return 1 if result["failed"] else 0
    finally:
        if db is None:
            resolved_db.close()


def main() -> int:
    configure_logging()
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
