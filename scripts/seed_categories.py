#!/usr/bin/env python3
"""
Replace every category document with the default storefront categories.

Usage:
  python seed_categories.py
  python seed_categories.py --yes
  python seed_categories.py --database-url sqlite+aiosqlite:///./data/storefront.db
"""
import argparse
import asyncio
import sys

from core.config import Settings
from core.container import container
from core.logging import configure_logging, get_logger
from services.categories import DEFAULT_CATEGORIES

logger = get_logger("seed_categories")


async def seed() -> int:
    await container.database().startup()
    try:
        return await container.category_service().seed()
    finally:
        await container.database().shutdown()


def main():
    parser = argparse.ArgumentParser(description="Seed the default product categories")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args()

    overrides = {"database_url": args.database_url} if args.database_url else {}
    settings = Settings(**overrides)
    configure_logging(settings)
    container.settings.override(settings)

    names = ", ".join(c["name"] for c in DEFAULT_CATEGORIES)
    if not args.yes:
        answer = input(f"Replace all categories with: {names}? [y/N] ")
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted")
            return 1

    try:
        count = asyncio.run(seed())
    except Exception as e:
        logger.error("Category seed failed", error=str(e))
        return 1
    print(f"Seeded {count} categories")
    return 0


if __name__ == "__main__":
    sys.exit(main())
