# docplane/core/exceptions.py
"""
Custom exceptions for docplane.
"""
from typing import Any, Dict, List, Optional


class DocplaneError(Exception):
    """Base exception for all docplane errors."""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigError(DocplaneError):
    """Runtime misuse: duplicate registration, double validation, bad options."""
    pass


class SchemaError(DocplaneError):
    """Invalid collection or field definition."""
    def __init__(self, collection: str, path: str, message: str):
        super().__init__(
            f"Schema Error| {collection}{'.' + path if path else ''} | {message}",
            {"collection": collection, "path": path}
        )
        self.collection = collection
        self.path = path


class DeadlockError(DocplaneError):
    """Components still pending after the maximum number of boot passes."""
    def __init__(self, stage: str, pending: List[str], reasons: List[str], passes: int = 100):
        super().__init__(
            f"Could not boot during {stage} stage after {passes} passes.\n\n"
            f"Deadlocked components: {', '.join(pending)}\n\n"
            "Reasons:\n" + "\n".join(f"  {reason}" for reason in reasons),
            {"stage": stage, "pending": pending, "reasons": reasons, "passes": passes}
        )
        self.stage = stage
        self.pending = pending
        self.reasons = reasons
        self.passes = passes


class MigrationExecutionError(DocplaneError):
    """A single migration's entry point failed."""
    def __init__(self, migration: str, cause: BaseException):
        super().__init__(
            f"Migration {migration} failed: {cause}",
            {"migration": migration, "cause": type(cause).__name__}
        )
        self.migration = migration
        self.cause = cause
