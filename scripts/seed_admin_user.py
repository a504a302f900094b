#!/usr/bin/env python3
"""
Create or promote an admin user document.

Prompts for anything not given on the command line.

Usage:
  python seed_admin_user.py
  python seed_admin_user.py --uid abc123 --email owner@example.com --name "Store Owner"
"""
import argparse
import asyncio
import sys

from core.config import Settings
from core.container import container
from core.logging import configure_logging, get_logger

logger = get_logger("seed_admin_user")


def prompt(label: str, value, required: bool = True) -> str:
    while not value:
        value = input(f"{label}: ").strip()
        if not required:
            break
    return value or ""


async def promote(user_id: str, email: str, display_name: str) -> bool:
    await container.database().startup()
    try:
        admins = container.admin_service()
        await admins.promote(user_id, email, display_name)
        return await admins.check_admin_status(user_id)
    finally:
        await container.database().shutdown()


def main():
    parser = argparse.ArgumentParser(description="Create or promote an admin user")
    parser.add_argument("--uid", help="User id (the sign-in provider's uid)")
    parser.add_argument("--email", help="Admin email address")
    parser.add_argument("--name", help="Display name")
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    args = parser.parse_args()

    overrides = {"database_url": args.database_url} if args.database_url else {}
    settings = Settings(**overrides)
    configure_logging(settings)
    container.settings.override(settings)

    user_id = prompt("User id", args.uid)
    email = prompt("Email", args.email)
    display_name = prompt("Display name (optional)", args.name, required=False)

    try:
        ok = asyncio.run(promote(user_id, email, display_name))
    except Exception as e:
        logger.error("Admin seed failed", user_id=user_id, error=str(e))
        return 1
    if not ok:
        print(f"User {user_id} was written but is not reported as admin")
        return 1
    print(f"{email} ({user_id}) is now an admin")
    return 0


if __name__ == "__main__":
    sys.exit(main())
