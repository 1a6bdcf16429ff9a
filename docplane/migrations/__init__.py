from docplane.migrations.loader import MigrationLoader, ModuleMigrationLoader, MappingMigrationLoader
from docplane.migrations.runner import MigrationRunner, LOCK_ID

__all__ = [
    "MigrationLoader",
    "ModuleMigrationLoader",
    "MappingMigrationLoader",
    "MigrationRunner",
    "LOCK_ID",
]
