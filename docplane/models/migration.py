from datetime import datetime, timezone
from typing import Optional
from beanie import Document
from pydantic import Field


class MigrationStatus(Document):
    """
    One record per applied migration, keyed by migration name.

    The record with id "$$MIGRATION-LOCK" is the lock sentinel; its uuid
    identifies the process currently holding the migration lock.
    """
    id: str
    applied_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    uuid: Optional[str] = None

    class Settings:
        name = "migration_status"
