# docplane/migrations/loader.py
"""
Migration loaders - migration identifier to migration module.

A migration module exposes:
- migrate():   sync or async entry point (required)
- skip:        never run, never record
- no_commit:   run, then drop the status record so it reruns next time
- desc:        one-line description printed under the STARTING banner
"""
import importlib
from typing import Any, Dict


class MigrationLoader:
    def load(self, name: str) -> Any:
        raise NotImplementedError


class ModuleMigrationLoader(MigrationLoader):
    """Imports `<package>.<name>`."""

    def __init__(self, package: str):
        self.package = package

    def load(self, name: str) -> Any:
        module_name = f"{self.package}.{name}" if self.package else name
        module = importlib.import_module(module_name)
        if not callable(getattr(module, "migrate", None)):
            raise AttributeError(f"Migration module {module_name} has no migrate() function")
        return module


class MappingMigrationLoader(MigrationLoader):
    """Serves pre-built migration objects by name."""

    def __init__(self, migrations: Dict[str, Any]):
        self.migrations = dict(migrations)

    def load(self, name: str) -> Any:
        try:
            return self.migrations[name]
        except KeyError:
            raise LookupError(f"Unknown migration: {name}") from None
