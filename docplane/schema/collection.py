# docplane/schema/collection.py
"""
Collection metadata.

A Collection is a boot component: it compiles its field tree on registration
(stage "compile"), is recompiled with stage "link" once every collection is
registered, and may expose its own boot hook through its definition.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from docplane.core.exceptions import SchemaError
from docplane.schema.compiler import SchemaCompiler
from docplane.schema.field import Field


@dataclass
class CollectionDefinition:
    id: str
    name: str
    fields: Dict[str, Any]
    values: Optional[List[List[Any]]] = None
    methods: Dict[str, Callable] = field(default_factory=dict)
    enum: bool = False
    client: bool = True
    internal: bool = False
    primary_key: str = "_id"
    boot: Optional[Callable] = None


class Collection:
    def __init__(self, definition: Optional[CollectionDefinition] = None, **kwargs: Any):
        if definition is None:
            definition = CollectionDefinition(**kwargs)
        self.definition = definition
        self.registry: Any = None
        self.fields: Dict[str, Field] = {}
        self.paths: Dict[str, Field] = {}
        self.label_field: Optional[Field] = None
        self.values: List[Dict[str, Any]] = []

    @property
    def id(self) -> str:
        return self.definition.id

    @property
    def name(self) -> str:
        return self.definition.name

    def boot(self, stage: str, pass_: int) -> Any:
        """Delegate to the definition's boot hook; no hook means ready."""
        if self.definition.boot is None:
            return None
        return self.definition.boot(stage, pass_)

    def compile(self, stage: str) -> None:
        """Rebuild the field tree from the raw definition."""
        self.paths = {}
        self.label_field = None

        compiler = SchemaCompiler(self.registry, self, stage)
        self.fields = compiler.fields("", self, self.definition.fields)

        primary_key = self.definition.primary_key
        if primary_key not in self.fields:
            raise SchemaError(self.name, "", f'missing a "{primary_key}" primary key field')

        if self.definition.enum and self.label_field is None:
            raise SchemaError(
                self.name, "",
                "some string field must have the labelField property set on an enumeration"
            )

        self._compile_values()

    def _compile_values(self) -> None:
        rows = self.definition.values
        self.values = []

        if not rows:
            return

        if not isinstance(rows, list):
            raise SchemaError(self.name, "", "expected values to be a list of rows")

        header = rows[0]
        for name in header:
            if name not in self.fields:
                raise SchemaError(self.name, "", f'values header names unknown field "{name}"')

        for row in rows[1:]:
            if len(row) != len(header):
                raise SchemaError(
                    self.name, "",
                    f"values row {row!r} has {len(row)} cells, expected {len(header)}"
                )
            self.values.append(dict(zip(header, row)))

    def by_id(self, value_id: Any) -> Optional[Dict[str, Any]]:
        key = self.definition.primary_key
        return next((v for v in self.values if v.get(key) == value_id), None)

    def by_label(self, label: str) -> Optional[Dict[str, Any]]:
        if self.label_field is None:
            return None
        name = self.label_field.name
        return next((v for v in self.values if v.get(name) == label), None)

    def method(self, name: str) -> Optional[Callable]:
        return self.definition.methods.get(name)

    def __repr__(self) -> str:
        return f"<Collection {self.name} ({self.id})>"
