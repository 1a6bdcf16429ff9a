#!/usr/bin/env python3
# scripts/run_migrations.py
"""
Run the configured migrations against MongoDB.

Usage:
    python scripts/run_migrations.py                  # MIGRATIONS from the environment
    python scripts/run_migrations.py m001 m002 ...    # explicit list

MIGRATION_PACKAGE selects the package the migration modules are imported from.
"""
import asyncio
import sys

from docplane.core.config import settings
from docplane.db import connect_db, disconnect_db, get_connection_error, get_status_store
from docplane.runtime import Runtime


async def run(names):
    await connect_db()
    store = get_status_store()
    if store is None:
        print(f"Error: MongoDB not available ({get_connection_error()})")
        return 1

    try:
        runtime = Runtime(settings=settings, status_store=store)
        await runtime.migrate(names or None)

        task = runtime.context.waiting_task
        if task is not None:
            # Another process holds the lock; stay until it lets go
            await task
    finally:
        await disconnect_db()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run(sys.argv[1:])))
