# docplane/schema/field.py
"""
Compiled field metadata.

A Field is owned by exactly one parent: a collection root, an object field
(as an entry of `fields`) or an array field (as its `of` element). Fields are
rebuilt every time their collection compiles; the raw `definition` dict is
never mutated by compilation.
"""
import copy
from typing import Any, Dict, Optional


class Field:
    def __init__(self, definition: Dict[str, Any]):
        self.definition: Dict[str, Any] = definition
        self.name: str = ""
        self.path: str = ""
        self.type_name: Optional[str] = definition.get("is")
        self.group: Optional[str] = definition.get("group")
        self.collection: Any = None
        self.parent: Any = None
        self.link: Any = None
        self.of: Optional["Field"] = None
        self.fields: Optional[Dict[str, "Field"]] = None

    @property
    def is_object(self) -> bool:
        return self.definition.get("is") == "object"

    @property
    def link_name(self) -> Optional[str]:
        """Target collection name of a link, without the optional marker."""
        link = self.definition.get("link")
        if isinstance(link, str):
            return link[:-1] if link.endswith("?") else link
        return None

    @property
    def is_optional_link(self) -> bool:
        link = self.definition.get("link")
        return isinstance(link, str) and link.endswith("?")

    def clone(self) -> "Field":
        """
        Deep copy of this field and its subtree.

        The owning collection, the parent and the link target are shared with
        the original; everything else is copied.
        """
        cloned = Field(copy.deepcopy(self.definition))
        cloned.name = self.name
        cloned.path = self.path
        cloned.type_name = self.type_name
        cloned.group = self.group
        cloned.collection = self.collection
        cloned.parent = self.parent
        cloned.link = self.link

        if self.of is not None:
            cloned.of = self.of.clone()
            cloned.of.parent = cloned

        if self.fields is not None:
            cloned.fields = {}
            for name, nested in self.fields.items():
                nested_clone = nested.clone()
                nested_clone.parent = cloned
                cloned.fields[name] = nested_clone

        return cloned

    def __repr__(self) -> str:
        kind = f"link={self.link_name}" if self.link_name else f"is={self.type_name}"
        return f"<Field {self.path or self.name} {kind}>"
