"""
Schema module - collections, fields, the compiler and the override engine.
"""
from docplane.schema.field import Field
from docplane.schema.collection import Collection, CollectionDefinition
from docplane.schema.compiler import SchemaCompiler
from docplane.schema.matching import is_compliant
from docplane.schema.overrides import SchemaOverrideEngine, merge_schema, SCHEMA_INVALIDATE
from docplane.schema.types import register_type

__all__ = [
    "Field",
    "Collection",
    "CollectionDefinition",
    "SchemaCompiler",
    "is_compliant",
    "SchemaOverrideEngine",
    "merge_schema",
    "SCHEMA_INVALIDATE",
    "register_type",
]
