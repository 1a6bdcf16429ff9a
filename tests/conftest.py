# tests/conftest.py
"""
Shared pytest fixtures for docplane tests.

Provides:
- In-memory status and override stores
- Fresh registry / context / event bus per test
- Runtime factory with fast migration polling
- Sample collection definitions
"""
import pytest
from typing import Any, Dict

from docplane.core.config import Settings, MigrationSettings, BootSettings, DatabaseSettings
from docplane.core.context import BootContext
from docplane.lib.events import EventBus
from docplane.migrations.loader import MappingMigrationLoader
from docplane.registry import Registry
from docplane.runtime import Runtime
from docplane.schema.collection import Collection

from tests.utils.memory_store import InMemoryDocumentStore


# ═══════════════════════════════════════════════════════
# FIXTURES - Stores and state
# ═══════════════════════════════════════════════════════

@pytest.fixture
def status_store():
    return InMemoryDocumentStore()


@pytest.fixture
def override_store():
    return InMemoryDocumentStore()


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def context():
    return BootContext()


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def test_settings():
    """Settings that do not depend on the environment."""
    return Settings(
        database=DatabaseSettings(url="mongodb://localhost:27017", name="docplane_test"),
        boot=BootSettings(max_passes=100),
        migration=MigrationSettings(
            migrate=False,
            migration_list=[],
            package="",
            poll_interval=0.01,
        ),
        debug=False,
    )


@pytest.fixture
def make_runtime(test_settings, status_store, override_store, context):
    """Build a Runtime over the in-memory stores."""
    def _make(migrations: Dict[str, Any] = None, **overrides) -> Runtime:
        kwargs = dict(
            settings=test_settings,
            status_store=status_store,
            override_store=override_store,
            migration_loader=MappingMigrationLoader(migrations or {}),
            context=context,
        )
        kwargs.update(overrides)
        return Runtime(**kwargs)
    return _make


# ═══════════════════════════════════════════════════════
# FIXTURES - Sample collections
# ═══════════════════════════════════════════════════════

@pytest.fixture
def user_collection():
    return Collection(
        id="u00",
        name="user",
        fields={
            "_id": {"is": "mongoid"},
            "name": {"is": "string", "labelField": True},
            "organization": {"link": "organization"},
            "profile": {
                "is": "object",
                "fields": {
                    "avatarUrl": {"is": "url"},
                },
            },
            "tags": {"is": "array", "of": "string"},
        },
    )


@pytest.fixture
def organization_collection():
    return Collection(
        id="o00",
        name="organization",
        fields={
            "_id": {"is": "mongoid"},
            "name": {"is": "string", "labelField": True},
        },
    )

