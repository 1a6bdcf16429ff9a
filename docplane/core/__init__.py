# docplane/core/__init__.py
"""
Core module - configuration, logging, exceptions and boot context.
"""
from docplane.core.config import settings, Settings
from docplane.core.context import BootContext
from docplane.core.exceptions import (
    DocplaneError,
    ConfigError,
    SchemaError,
    DeadlockError,
    MigrationExecutionError,
)
from docplane.core.logging import log, log_section, log_banner

__all__ = [
    "settings",
    "Settings",
    "BootContext",
    "DocplaneError",
    "ConfigError",
    "SchemaError",
    "DeadlockError",
    "MigrationExecutionError",
    "log",
    "log_section",
    "log_banner",
]
