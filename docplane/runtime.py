# docplane/runtime.py
"""
Runtime - the explicit home of everything the boot lifecycle shares.

Wires the registry, the stage resolver, the schema override engine and the
migration runner around one BootContext. Tests build a fresh Runtime (or call
reset()) instead of clearing module globals.
"""
from typing import Any, Dict, List, Optional

from docplane.boot.resolver import StageResolver
from docplane.core.config import Settings, settings as default_settings
from docplane.core.context import BootContext
from docplane.core.exceptions import ConfigError
from docplane.core.logging import log
from docplane.db.store import DocumentStore
from docplane.lib.events import EventBus
from docplane.migrations.loader import MigrationLoader, ModuleMigrationLoader
from docplane.migrations.runner import MigrationRunner
from docplane.registry import Registry
from docplane.schema.collection import Collection
from docplane.schema.compiler import STAGE_LINK
from docplane.schema.field import Field
from docplane.schema.overrides import SchemaOverrideEngine


class Runtime:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        status_store: Optional[DocumentStore] = None,
        override_store: Optional[DocumentStore] = None,
        migration_loader: Optional[MigrationLoader] = None,
        event_bus: Optional[EventBus] = None,
        registry: Optional[Registry] = None,
        context: Optional[BootContext] = None,
    ):
        self.settings = settings or default_settings
        self.registry = registry or Registry()
        self.context = context or BootContext()
        self.event_bus = event_bus or EventBus()

        self.resolver = StageResolver(self.registry, self.context, max_passes=self.settings.boot.max_passes)
        self.overrides = SchemaOverrideEngine(self.registry, override_store, self.context, self.event_bus)

        self.status_store = status_store
        self.migration_loader = migration_loader or ModuleMigrationLoader(self.settings.migration.package)
        self.migrations = (
            MigrationRunner(status_store, self.migration_loader, self.context, self.settings.migration)
            if status_store is not None else None
        )

        self._validated = False

    # ═══════════════════════════════════════════════════════════════════════
    # REGISTRATION
    # ═══════════════════════════════════════════════════════════════════════

    def register(self, component: Any) -> Any:
        return self.registry.register(component)

    def forget(self, component_id: str) -> None:
        """
        Drop a component so it can be registered (and booted) again.

        Must not be called while a bootstrap is running.
        """
        self.registry.forget(component_id)
        self.context.forget_component(component_id)

    @property
    def collections(self) -> List[Collection]:
        return self.registry.collections

    # ═══════════════════════════════════════════════════════════════════════
    # BOOT
    # ═══════════════════════════════════════════════════════════════════════

    async def validate(self) -> None:
        """
        Boot every registered component: compile, link resolution, link,
        post-link, then migrations when settings.migration.migrate is set.

        Raises DeadlockError when a stage cannot converge.
        """
        if self._validated:
            raise ConfigError("Runtime.validate() called more than once")
        self._validated = True

        await self.boot()

        if self.settings.migration.migrate:
            await self.migrate()

    async def boot(self) -> None:
        """Run the three boot stages. Safe to repeat after new registrations."""
        log("BOOT", f"Booting {len(self.registry.components)} component(s)")

        await self.resolver.bootstrap("compile")

        for collection in self.registry.collections:
            collection.compile(STAGE_LINK)

        await self.resolver.bootstrap("link")
        await self.resolver.bootstrap("post-link")

        log("BOOT", "✅ Boot complete")

    # ═══════════════════════════════════════════════════════════════════════
    # SCHEMA
    # ═══════════════════════════════════════════════════════════════════════

    async def fields_for(self, collection: Collection, obj: Any) -> Dict[str, Field]:
        return await self.overrides.fields_for(collection, obj)

    def mixin(self, collection: Collection, definition: Dict[str, Any]) -> None:
        self.overrides.mixin(collection, definition)

    # ═══════════════════════════════════════════════════════════════════════
    # MIGRATIONS
    # ═══════════════════════════════════════════════════════════════════════

    async def migrate(self, migrations: Optional[List[str]] = None) -> None:
        if self.migrations is None:
            log("MIGRATION", "⚠️ No migration status store configured, skipping migrations")
            return
        await self.migrations.migrate(migrations)

    @property
    def waiting_on_migration(self) -> bool:
        return self.context.waiting_on_migration

    def reset(self) -> None:
        """Forget every component and all cached state."""
        self.registry.clear()
        self.context.reset()
        self._validated = False
