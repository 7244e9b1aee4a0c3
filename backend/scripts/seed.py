#!/usr/bin/env python3
"""
Seed the development user accounts.

Creates admin@test.com (admin) and user@test.com (user), both with the
password ``test123``. Accounts that already exist are left untouched.

Run from the backend directory:
    python scripts/seed.py

Options:
    --database-url  Override DATABASE_URL from the environment
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for app imports
sys.path.insert(0, str(Path(__file__).parent.parent))


def print_header(msg: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {msg}")
    print(f"{'=' * 60}")


def print_step(msg: str) -> None:
    print(f"\n>>> {msg}")


async def run(database_url: str | None) -> int:
    from app.core.config import settings
    from app.core.logging import setup_logging
    from app.db.session import create_engine, init_db
    from app.services.seed import seed_users
    from app.services.stores import build_stores

    setup_logging()

    url = database_url or settings.DATABASE_URL
    print_header("Seeding users")
    print_step(f"Database: {url}")

    engine = create_engine(url)
    try:
        await init_db(engine)
        stores = build_stores(engine, settings)
        result = await seed_users(stores.credentials)
    finally:
        await engine.dispose()

    for email in result.created:
        print(f"    created  {email}")
    for email in result.skipped:
        print(f"    skipped  {email} (already exists)")
    for error in result.errors:
        print(f"    FAILED   {error['email']}: {error['error']}")

    print_step(f"{len(result.created)} created, {len(result.skipped)} skipped, {len(result.errors)} failed")
    return 1 if result.errors else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed development user accounts")
    parser.add_argument("--database-url", help="Database URL (defaults to DATABASE_URL)")
    args = parser.parse_args()

    sys.exit(asyncio.run(run(args.database_url)))


if __name__ == "__main__":
    main()
