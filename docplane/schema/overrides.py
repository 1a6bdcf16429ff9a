# docplane/schema/overrides.py
"""
Schema override ("mixin") engine.

Overrides are persisted documents that amend a collection's fields for the
objects that match them:

    {
        "_id": ...,
        "collection": "u00",                       # target collection id
        "match": {"organization": "acme"},         # predicate spec
        "def": {"fields": {"profile": {"is": "object", "fields": {...}}}},
        "src": "...",                              # optional source text
        "updated_at": ...,                         # stamped on save
    }

All overrides are bulk-loaded into the boot context on first use and dropped
in full whenever a schema.invalidate event is broadcast.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pydantic import ValidationError

from docplane.core.context import BootContext
from docplane.core.exceptions import SchemaError
from docplane.core.logging import log
from docplane.db.store import DocumentStore
from docplane.lib.events import EventBus
from docplane.models.schema import SchemaOverrideFields
from docplane.schema.collection import Collection
from docplane.schema.compiler import SchemaCompiler, STAGE_COMPILE, STAGE_LINK
from docplane.schema.field import Field
from docplane.schema.matching import Predicate, is_compliant

SCHEMA_INVALIDATE = "schema.invalidate"


@dataclass
class CompiledOverride:
    record: Dict[str, Any]
    collection_id: str
    fields: Dict[str, Field]
    matcher: Predicate


def merge_schema(fields: Dict[str, Field], name: str, incoming: Field) -> bool:
    """
    Merge `incoming` into `fields[name]`.

    Two object fields are merged recursively into a clone of the existing
    field, so the shared base field is never mutated; returns True.
    Anything else replaces the entry outright (latest match wins); returns False.
    """
    existing = fields.get(name)

    if existing is not None:
        if existing.is_object and incoming.is_object:
            merged = existing.clone()
            nested = dict(merged.fields or {})

            for nested_name, nested_field in (incoming.fields or {}).items():
                merge_schema(nested, nested_name, nested_field)

            merged.fields = nested
            merged.definition["fields"] = {n: f.definition for n, f in nested.items()}
            fields[name] = merged
            return True

        # Type mismatch or scalar field: the later override wins
        log("OVERRIDES", f"Field {name} replaced by override (is={incoming.type_name}, was={existing.type_name})")

    fields[name] = incoming
    return False


class SchemaOverrideEngine:
    """Loads, caches and applies schema overrides for the registered collections."""

    def __init__(
        self,
        registry: Any,
        store: Optional[DocumentStore],
        context: BootContext,
        event_bus: Optional[EventBus] = None,
    ):
        self.registry = registry
        self.store = store
        self.context = context
        self.event_bus = event_bus
        self._generation = 0

        if event_bus is not None:
            event_bus.subscribe(SCHEMA_INVALIDATE, self._on_invalidate)

    # ═══════════════════════════════════════════════════════════════════════
    # CACHE
    # ═══════════════════════════════════════════════════════════════════════

    def invalidate(self) -> None:
        """Discard the whole override cache."""
        self._generation += 1
        self.context.override_cache = None

    def _on_invalidate(self, event: Dict[str, Any]) -> None:
        log("EVENTS", f"Schema cache invalidated ({event.get('reason', 'change')})")
        self.invalidate()

    def compile_fields(self, collection: Any, definition: Dict[str, Any]) -> Dict[str, Field]:
        """Compile an incremental field tree against `collection` without touching it."""
        def_fields = definition.get("fields")
        SchemaCompiler(self.registry, collection, STAGE_COMPILE, dynamic=True).fields("", collection, def_fields)
        return SchemaCompiler(self.registry, collection, STAGE_LINK, dynamic=True).fields("", collection, def_fields)

    async def _load(self) -> Tuple[List[CompiledOverride], bool]:
        """Load every override. The bool is False when some target collection is unknown."""
        records = await self.store.find() if self.store is not None else []
        compiled: List[CompiledOverride] = []
        complete = True

        for record in records:
            collection_id = record.get("collection")
            collection = self.registry.get(collection_id)

            if not isinstance(collection, Collection):
                complete = False
                continue

            compiled.append(CompiledOverride(
                record=record,
                collection_id=collection_id,
                fields=self.compile_fields(collection, record.get("def") or {"fields": {}}),
                matcher=is_compliant(record.get("match") or {}),
            ))

        return compiled, complete

    # ═══════════════════════════════════════════════════════════════════════
    # LOOKUP
    # ═══════════════════════════════════════════════════════════════════════

    async def fields_for(self, collection: Any, obj: Any) -> Dict[str, Field]:
        """
        Effective field map for `collection` given candidate object `obj`.

        Overrides are applied in storage order. The collection's own Field
        instances are never modified.
        """
        complete = True
        cache = self.context.override_cache

        if cache is None:
            generation = self._generation
            cache, complete = await self._load()
            if generation == self._generation:
                self.context.override_cache = cache
            log("SCHEMA", f"Loaded {len(cache)} schema override(s){'' if complete else ' (incomplete)'}")

        fields: Dict[str, Field] = dict(collection.fields)

        for override in cache:
            if override.collection_id == collection.id and override.matcher(obj):
                for name, field in override.fields.items():
                    merge_schema(fields, name, field)

        if not complete:
            self.context.override_cache = None

        return fields

    # ═══════════════════════════════════════════════════════════════════════
    # WRITES
    # ═══════════════════════════════════════════════════════════════════════

    async def save(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate, stamp and insert or replace an override, then broadcast
        invalidation. Returns the stored record.

        Raises:
            SchemaError when the record does not have the override shape
        """
        body = {key: value for key, value in record.items() if key not in ("_id", "updated_at")}
        try:
            validated = SchemaOverrideFields.model_validate(body)
        except ValidationError as e:
            raise SchemaError(str(record.get("collection")), "", f"Invalid schema override: {e}") from e

        record = {
            "_id": record.get("_id") if record.get("_id") is not None else ObjectId(),
            **validated.model_dump(by_alias=True),
        }

        await self.store.save(record)
        await self._broadcast("save", record["_id"])
        return record

    async def remove(self, override_id: Any) -> None:
        await self.store.delete_by_id(override_id)
        await self._broadcast("remove", override_id)

    async def _broadcast(self, reason: str, override_id: Any) -> None:
        if self.event_bus is None:
            self.invalidate()
            return
        await self.event_bus.broadcast(SCHEMA_INVALIDATE, {"reason": reason, "override_id": override_id})

    # ═══════════════════════════════════════════════════════════════════════
    # STATIC MIXINS
    # ═══════════════════════════════════════════════════════════════════════

    def mixin(self, collection: Any, definition: Dict[str, Any]) -> None:
        """
        Permanently add fields to a collection.

        The raw definitions are written into the collection's definition so a
        later recompile keeps them.
        """
        def_fields = definition.get("fields") or {}
        SchemaCompiler(self.registry, collection, STAGE_COMPILE).fields("", collection, def_fields)
        compiled = SchemaCompiler(self.registry, collection, STAGE_LINK).fields("", collection, def_fields)

        for name, field in compiled.items():
            collection.definition.fields[name] = field.definition
            collection.fields[name] = field
