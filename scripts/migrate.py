#!/usr/bin/env python3
"""Apply the numbered .sql files under migrations/ that have not run yet."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import asyncpg

from reelmatch.config import get_settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


async def run_migrations(dsn: str, *, dry_run: bool = False) -> list[str]:
    """Apply pending migrations in filename order; return the names applied."""
    conn: asyncpg.Connection = await asyncpg.connect(dsn)
    try:
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_migrations (
                filename TEXT PRIMARY KEY,
                applied_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
            """)
        applied = {row["filename"] for row in await conn.fetch("SELECT filename FROM schema_migrations")}

        pending = [p for p in sorted(MIGRATIONS_DIR.glob("*.sql")) if p.name not in applied]
        if not pending:
            logger.info("schema is up to date")
            return []

        for path in pending:
            if dry_run:
                logger.info("would apply %s", path.name)
                continue
            logger.info("apply %s", path.name)
            async with conn.transaction():
                await conn.execute(path.read_text(encoding="utf-8"))
                await conn.execute("INSERT INTO schema_migrations (filename) VALUES ($1)", path.name)

        logger.info("%d migration(s) %s", len(pending), "pending" if dry_run else "applied")
        return [p.name for p in pending]
    finally:
        await conn.close()


def main() -> None:
    asyncio.run(run_migrations(get_settings().dsn, dry_run="--dry-run" in sys.argv))


if __name__ == "__main__":
    main()
