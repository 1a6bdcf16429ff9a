"""
docplane - bootstrap and schema-evolution control plane for a document
database modeling layer.
"""
from docplane.core.context import BootContext
from docplane.core.exceptions import DeadlockError, SchemaError, ConfigError
from docplane.registry import Registry, Plugin
from docplane.runtime import Runtime
from docplane.schema.collection import Collection, CollectionDefinition

__version__ = "0.1.0"

__all__ = [
    "BootContext",
    "DeadlockError",
    "SchemaError",
    "ConfigError",
    "Registry",
    "Plugin",
    "Runtime",
    "Collection",
    "CollectionDefinition",
]
