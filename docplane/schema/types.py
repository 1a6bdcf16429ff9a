# docplane/schema/types.py
"""
Field type names known to the schema compiler.

Types only carry a name here; per-type serialization and validation live
outside this package.
"""
from typing import Set

BUILTIN_TYPES: Set[str] = {
    "array",
    "bitmask",
    "boolean",
    "date",
    "datetime",
    "double",
    "duration",
    "email",
    "image",
    "integer",
    "link",
    "mongoid",
    "object",
    "password",
    "string",
    "text",
    "time",
    "uid",
    "url",
}

_registered: Set[str] = set(BUILTIN_TYPES)


def register_type(name: str) -> None:
    """Make an extra type name available to field definitions."""
    _registered.add(name)


def is_known_type(name: str) -> bool:
    return name in _registered
