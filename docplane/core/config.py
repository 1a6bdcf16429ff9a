# docplane/core/config.py
"""
Application configuration - single source of truth for all settings.
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str) -> List[str]:
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class DatabaseSettings:
    """MongoDB connection configuration."""
    url: str = field(default_factory=lambda: os.getenv("MONGODB_URL", "mongodb://localhost:27017"))
    name: str = field(default_factory=lambda: os.getenv("MONGODB_DB", "docplane"))
    server_selection_timeout_ms: int = 5000


@dataclass
class BootSettings:
    """Stage resolver configuration."""
    max_passes: int = field(default_factory=lambda: int(os.getenv("BOOT_MAX_PASSES", "100")))


@dataclass
class MigrationSettings:
    """
    Migration runner configuration.

    - migration_list: ordered migration identifiers (MIGRATIONS=a,b,c)
    - package: python package the identifiers are imported from
    - migrate: run migrations automatically at the end of Runtime.validate()
    """
    migrate: bool = field(default_factory=lambda: _env_flag("MIGRATE"))
    migration_list: List[str] = field(default_factory=lambda: _env_list("MIGRATIONS"))
    package: str = field(default_factory=lambda: os.getenv("MIGRATION_PACKAGE", "migrations"))
    poll_interval: float = field(default_factory=lambda: float(os.getenv("MIGRATION_POLL_INTERVAL", "5")))
    lock_id: str = "$$MIGRATION-LOCK"


@dataclass
class Settings:
    """Main application settings."""
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    boot: BootSettings = field(default_factory=BootSettings)
    migration: MigrationSettings = field(default_factory=MigrationSettings)
    debug: bool = field(default_factory=lambda: _env_flag("DOCPLANE_DEBUG"))


# Singleton instance
settings = Settings()
