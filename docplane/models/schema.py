from datetime import datetime, timezone
from typing import Any, Dict, Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field


class SchemaOverrideFields(BaseModel):
    """
    Validated body of a schema override, without its _id.

    - collection: id of the target collection
    - match: predicate spec tested against candidate objects
    - definition: incremental field tree, stored as {"fields": {...}} under "def"
    """
    collection: str
    match: Dict[str, Any] = Field(default_factory=dict)
    definition: Dict[str, Any] = Field(default_factory=lambda: {"fields": {}}, alias="def")
    src: Optional[str] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SchemaOverride(Document):
    """A stored, conditionally-applied amendment to a collection's schema."""
    collection: Indexed(str)
    match: Dict[str, Any] = Field(default_factory=dict)
    definition: Dict[str, Any] = Field(default_factory=lambda: {"fields": {}}, alias="def")
    src: Optional[str] = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    class Settings:
        name = "schema_overrides"
