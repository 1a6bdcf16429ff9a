# docplane/schema/compiler.py
"""
Schema compiler - raw field definitions to Field trees.

Runs in one of two stages:
- compile: structural pass. Links to collections that are not registered yet
  are left unresolved (a deferral, not an error).
- link: every link must resolve. Optional links ("name?") whose target does
  not exist are pruned from the tree instead.

Field definition grammar:
    <field>:  "<type name>" | { is: <type>, ... } | { link: "<collection>[?]", ... }
    object:   { is: "object", fields: { <name>: <field>, ... } }
    array:    { is: "array", of: <field> }
    group:    { "$<group>": { "$base": {...}, <name>: {...}, ... } }
"""
from collections.abc import Mapping
from typing import Any, Dict, Optional

from docplane.core.exceptions import SchemaError
from docplane.core.logging import log
from docplane.schema.field import Field
from docplane.schema.types import is_known_type

STAGE_COMPILE = "compile"
STAGE_LINK = "link"


class SchemaCompiler:
    """
    Compiles field definitions for one collection.

    With dynamic=True the compiled fields are not recorded in the collection's
    `paths` and do not claim its label field (used for overrides and mixins
    compiled against an existing collection).
    """

    def __init__(self, registry: Any, collection: Any, stage: str, dynamic: bool = False):
        if stage not in (STAGE_COMPILE, STAGE_LINK):
            raise ValueError(f"Unknown compile stage: {stage}")
        self.registry = registry
        self.collection = collection
        self.stage = stage
        self.dynamic = dynamic

    def err(self, path: str, message: str) -> SchemaError:
        return SchemaError(self.collection.name, path, message)

    def _find_collection(self, name: str) -> Any:
        if self.registry is None:
            return None
        return self.registry.find_collection(name)

    # ───────────────────────────────────────────────────────────────────────
    # FIELD MAPS
    # ───────────────────────────────────────────────────────────────────────

    def fields(self, path: str, parent: Any, def_fields: Any) -> Dict[str, Field]:
        """Compile a {name: definition} map into a {name: Field} map."""
        if def_fields is None:
            raise self.err(path, 'Missing "fields"')

        if not isinstance(def_fields, Mapping):
            raise self.err(path, f'"fields" should be an object, got: {def_fields!r}')

        compiled: Dict[str, Field] = {}

        for name, field_def in self._expand_groups(path, def_fields).items():
            field_path = f"{path}.{name}" if path else name
            field = self._make_field(field_path, field_def)

            if self._prune(field):
                log("COMPILER", f"Pruned optional link {self.collection.name}.{field_path}")
                continue

            field.parent = parent
            compiled[name] = field
            self.field(field_path, field)

        return compiled

    def _expand_groups(self, path: str, def_fields: Mapping) -> Dict[str, Any]:
        if not any(name.startswith("$") for name in def_fields):
            return dict(def_fields)

        expanded: Dict[str, Any] = {}

        for name, value in def_fields.items():
            if name.startswith("$"):
                base = value.get("$base") if isinstance(value, Mapping) else None
                if base is None:
                    raise self.err(path, f'group "{name}" is missing a $base property')

                for field_name, field_def in value.items():
                    if field_name == "$base":
                        continue
                    if isinstance(field_def, str):
                        field_def = {"is": field_def}
                    if field_name in expanded:
                        raise self.err(path, f'group "{name}" is redefining field "{field_name}"')
                    expanded[field_name] = {**base, **field_def, "group": name}
            else:
                if name in expanded:
                    raise self.err(
                        path,
                        f'field "{name}" is being redefined (was originally defined in group '
                        f'"{expanded[name].get("group")}")'
                    )
                expanded[name] = value

        return expanded

    def _make_field(self, path: str, field_def: Any) -> Field:
        if isinstance(field_def, str):
            field_def = {"is": field_def}

        if not isinstance(field_def, Mapping):
            raise self.err(path, f'Invalid field definition, expected an object, got: "{field_def}"')

        return Field(dict(field_def))

    def _prune(self, field: Field) -> bool:
        return (
            self.stage == STAGE_LINK
            and field.is_optional_link
            and self._find_collection(field.link_name) is None
        )

    # ───────────────────────────────────────────────────────────────────────
    # SINGLE FIELD
    # ───────────────────────────────────────────────────────────────────────

    def field(self, path: str, field: Field) -> None:
        definition = field.definition
        collection = self.collection

        field.collection = collection
        field.path = path
        field.name = path.rsplit(".", 1)[-1]

        if not self.dynamic:
            collection.paths[path] = field
            if definition.get("labelField"):
                collection.label_field = field

        if "link" in definition:
            self._link(path, field)
        elif "is" in definition:
            self._typed(path, field)
        else:
            raise self.err(path, f"Unknown field definition: {definition!r}")

        if definition.get("denormal") and "link" not in definition:
            raise self.err(path, '"denormal" is only a valid option on links')

    def _link(self, path: str, field: Field) -> None:
        link_name = field.link_name
        if not link_name:
            raise self.err(path, f"Links must name a collection, got: {field.definition.get('link')!r}")

        field.type_name = "link"
        target = self._find_collection(link_name)

        if target is not None:
            field.link = target
        elif self.stage == STAGE_LINK:
            raise self.err(path, f"Unknown collection {link_name}")

    def _typed(self, path: str, field: Field) -> None:
        type_name = field.definition["is"]

        if not isinstance(type_name, str):
            raise self.err(path, f"Expected field.is to be a string, got: {type_name!r}")

        if self._find_collection(type_name) is not None:
            raise self.err(
                path,
                f'Trying to "is" a collection -- {type_name}, either make it a "link" or a metadata snippet'
            )

        if not is_known_type(type_name):
            raise self.err(path, f'Unknown type "{type_name}"')

        field.type_name = type_name

        if type_name == "object":
            nested = field.definition.get("fields")
            field.fields = self.fields(path, field, nested) if nested is not None else {}
        elif type_name == "array":
            field.of = self._element(path, field)

    def _element(self, path: str, parent: Field) -> Optional[Field]:
        of_def = parent.definition.get("of")
        if of_def is None:
            return None

        element_path = f"{path}._"
        element = self._make_field(element_path, of_def)
        if self._prune(element):
            return None

        element.parent = parent
        self.field(element_path, element)
        return element
