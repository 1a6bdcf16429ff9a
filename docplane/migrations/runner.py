# docplane/migrations/runner.py
"""
Migration runner with a database-backed mutex.

Every process of a fleet may call migrate() at startup. The first one to
insert the lock sentinel {_id: "$$MIGRATION-LOCK", uuid: <token>} runs the
migration list; the others see a foreign token, start a background wait loop
and return immediately.

    AcquireLock ──(our token)──> RunMigrations ──> ReleaseLock ──> Done
         │
         └──(foreign token)──> Waiting (polls until the sentinel is gone)

Per migration:
- skip                   -> SKIPPING, no status record
- status record exists   -> SKIPPING (already applied)
- otherwise the status record is written first, then migrate() runs;
  a failure or no_commit removes the record again so the migration reruns
  on the next call. A failure never stops the remaining migrations.

migrate() never raises. Outcomes are only visible in the log.
"""
import asyncio
import inspect
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from docplane.core.config import MigrationSettings
from docplane.core.context import BootContext
from docplane.core.exceptions import MigrationExecutionError
from docplane.core.logging import log, log_banner, log_section
from docplane.db.store import DocumentStore
from docplane.migrations.loader import MigrationLoader

LOCK_ID = "$$MIGRATION-LOCK"


class MigrationRunner:
    def __init__(
        self,
        store: DocumentStore,
        loader: MigrationLoader,
        context: BootContext,
        migration_settings: Optional[MigrationSettings] = None,
    ):
        self.store = store
        self.loader = loader
        self.context = context
        self.settings = migration_settings or MigrationSettings()
        self.lock_id = self.settings.lock_id or LOCK_ID
        self.poll_interval = self.settings.poll_interval

    # ═══════════════════════════════════════════════════════════════════════
    # ENTRY POINT
    # ═══════════════════════════════════════════════════════════════════════

    async def migrate(self, migrations: Optional[List[str]] = None) -> None:
        """Run `migrations` (default: the configured list) if the lock can be taken."""
        names = list(migrations if migrations is not None else self.settings.migration_list)
        token = str(uuid.uuid4())
        acquired = False
        started = time.monotonic()

        try:
            lock = await self.store.upsert_on_insert(self.lock_id, {"uuid": token})

            if (lock or {}).get("uuid") != token:
                log("MIGRATION", "Migration lock held by another process")
                self._start_waiting()
                return

            acquired = True
            log_section("MIGRATION", "Beginning Migration")

            for name in names:
                await self._run_one(name)

        except Exception as e:
            log("MIGRATION", f"❌ Migration run aborted: {e}")
            log("MIGRATION", traceback.format_exc())
        finally:
            if acquired:
                await self._release_lock(started)

    async def _release_lock(self, started: float) -> None:
        try:
            await self.store.delete_by_id(self.lock_id)
        except Exception as e:
            log("MIGRATION", f"❌ Could not release migration lock: {e}")
            return
        elapsed_ms = int((time.monotonic() - started) * 1000)
        log_section("MIGRATION", f"End Migration ({elapsed_ms}ms)")

    # ═══════════════════════════════════════════════════════════════════════
    # SINGLE MIGRATION
    # ═══════════════════════════════════════════════════════════════════════

    async def _run_one(self, name: str) -> None:
        try:
            migration = self.loader.load(name)
        except Exception as e:
            log_banner(name, "error", note=f"Could not load: {e}")
            return

        if getattr(migration, "skip", False):
            log_banner(name, "skip", note="Marked as skip")
            return

        if await self.store.find_by_id(name) is not None:
            log_banner(name, "skip", note="Already applied")
            return

        await self.store.save({"_id": name, "applied_on": datetime.now(timezone.utc)})

        log_banner(name, "start")
        desc = getattr(migration, "desc", None)
        if desc:
            log_banner(name, desc=desc)

        started = time.monotonic()
        try:
            result = migration.migrate()
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            error = MigrationExecutionError(name, e)
            log("MIGRATION", error.message)
            log("MIGRATION", traceback.format_exc())
            await self.store.delete_by_id(name)
            log_banner(name, "error")
            return

        elapsed_ms = int((time.monotonic() - started) * 1000)

        if getattr(migration, "no_commit", False):
            await self.store.delete_by_id(name)
            log_banner(name, "complete", note="Not committed", elapsed_ms=elapsed_ms)
        else:
            log_banner(name, "complete", elapsed_ms=elapsed_ms)

    # ═══════════════════════════════════════════════════════════════════════
    # WAITING
    # ═══════════════════════════════════════════════════════════════════════

    def _start_waiting(self) -> None:
        self.context.waiting_on_migration = True

        task = self.context.waiting_task
        if task is not None and not task.done():
            return

        self.context.waiting_task = asyncio.create_task(self._wait_for_unlock())

    async def _wait_for_unlock(self) -> None:
        """Poll until the lock sentinel disappears. Does not rerun migrations."""
        while True:
            try:
                lock: Any = await self.store.find_by_id(self.lock_id)
            except Exception as e:
                log("MIGRATION", f"⚠️ Could not check migration lock: {e}")
                lock = True

            if lock is None:
                self.context.waiting_on_migration = False
                log("MIGRATION", "Migration lock released")
                return

            self.context.waiting_on_migration = True
            log("MIGRATION", "Waiting for migration to finish...")
            await asyncio.sleep(self.poll_interval)
