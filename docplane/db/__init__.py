# docplane/db/__init__.py
"""
Database module.
"""
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient

from docplane.core.config import settings
from docplane.core.logging import log
from docplane.db.store import DocumentStore, MotorDocumentStore

# Motor client instance
_client = None
_db = None
_connection_error: Optional[str] = None


async def connect_db(db_settings=None):
    """
    Connect to MongoDB and initialize beanie.

    If MongoDB is not available, stores the error for later retrieval
    rather than raising.
    """
    global _client, _db, _connection_error
    db_settings = db_settings or settings.database
    try:
        _client = AsyncIOMotorClient(
            db_settings.url,
            serverSelectionTimeoutMS=db_settings.server_selection_timeout_ms,
        )
        _db = _client[db_settings.name]

        # Fails fast if MongoDB is not running
        await _client.admin.command("ping")
        log("DB", "✅ Connected to MongoDB")

        from beanie import init_beanie
        from docplane.models import MigrationStatus, SchemaOverride

        await init_beanie(
            database=_db,
            document_models=[MigrationStatus, SchemaOverride]
        )
        log("DB", "✅ Beanie ODM Initialized")
        _connection_error = None
    except Exception as e:
        error_msg = str(e)
        log("DB", f"⚠️ MongoDB not available: {error_msg}")
        log("DB", f"ℹ️ Migrations and schema overrides are disabled until {db_settings.url} is reachable")
        _client = None
        _db = None
        _connection_error = error_msg


async def disconnect_db():
    """Disconnect from MongoDB."""
    global _client, _db
    if _client:
        _client.close()
        log("DB", "Disconnected from MongoDB")
    _client = None
    _db = None


def get_db():
    """
    Get database instance.

    Returns None if MongoDB is not connected.
    """
    return _db


def is_connected() -> bool:
    """Check if database is connected."""
    return _db is not None


def get_connection_error() -> Optional[str]:
    """Get connection error message if connection failed."""
    return _connection_error


def get_status_store() -> Optional[DocumentStore]:
    """Store over the migration status collection, or None when disconnected."""
    if _db is None:
        return None
    from docplane.models import MigrationStatus
    return MotorDocumentStore.for_model(MigrationStatus)


def get_override_store() -> Optional[DocumentStore]:
    """Store over the schema override collection, or None when disconnected."""
    if _db is None:
        return None
    from docplane.models import SchemaOverride
    return MotorDocumentStore.for_model(SchemaOverride)


__all__ = [
    "connect_db",
    "disconnect_db",
    "get_db",
    "is_connected",
    "get_connection_error",
    "get_status_store",
    "get_override_store",
    "DocumentStore",
    "MotorDocumentStore",
]
