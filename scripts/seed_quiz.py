#!/usr/bin/env python3
"""CLI script to seed the quiz catalog of one or all stores from the curation table.

Usage:
    uv run python scripts/seed_quiz.py --store br
    uv run python scripts/seed_quiz.py --all
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import structlog

from curation_service.config import get_settings
from curation_service.infrastructure.kv import close_kv_store, get_kv_store
from curation_service.infrastructure.shopify import ShopifyClient
from curation_service.services import QuizCatalogStore
from curation_service.stores import get_store_registry
from shared.constants import QUIZ_CURATION

logger = structlog.get_logger()


async def main(store_ids: list[str]) -> int:
    """Seed each store in turn; returns the number of handles that failed."""
    settings = get_settings()
    registry = get_store_registry()
    kv = await get_kv_store()
    resolver = ShopifyClient(settings)
    quizzes = QuizCatalogStore(kv, registry)

    failed = 0
    try:
        for store_id in store_ids:
            result = await quizzes.seed(
                store_id,
                QUIZ_CURATION,
                resolver,
                max_concurrency=settings.shopify_max_concurrency,
            )
            failed += len(result.failed)
            logger.info("Store seeded", **result.model_dump(by_alias=True))
    finally:
        await resolver.close()
        await close_kv_store()
    return failed


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed quiz catalogs from the curation table")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--store", action="append", help="Store id (repeatable)")
    group.add_argument("--all", action="store_true", help="Seed every configured store")
    args = parser.parse_args()

    stores = [s.id for s in get_store_registry()] if args.all else args.store
    failures = asyncio.run(main(stores))
    sys.exit(1 if failures else 0)
