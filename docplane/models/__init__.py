from docplane.models.migration import MigrationStatus
from docplane.models.schema import SchemaOverride, SchemaOverrideFields

__all__ = ["MigrationStatus", "SchemaOverride", "SchemaOverrideFields"]
