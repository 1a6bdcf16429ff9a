import sys
from datetime import datetime
from typing import Any, Optional

from docplane.core.config import settings


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else is gated behind DEBUG

INFO_SCOPES = {
    "BOOT",         # Stage lifecycle
    "SCHEMA",       # Override cache loads
    "MIGRATION",    # Migration banners
    "DB",           # Connection status
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "RESOLVER",
    "EVENTS",
    "COMPILER",
}

# DOCPLANE_DEBUG=true, read once through settings
DEBUG_MODE = settings.debug

BANNER_WIDTH = 104

ACTION_LABELS = {
    "start": "STARTING",
    "complete": "COMPLETE",
    "skip": "SKIPPING",
    "error": "ERROR",
}


def log(scope: str, message: str, data: Any = None) -> None:
    """
    Unified logging function for docplane.

    Only INFO_SCOPES are shown by default.
    Set DOCPLANE_DEBUG=true to see all scopes.
    """
    if not DEBUG_MODE and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] [{scope}] {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()


def log_section(scope: str, title: str) -> None:
    """
    Log a section header with visual separator.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")
    filler = max(BANNER_WIDTH - len(title) - 2, 0)
    lead = filler // 2
    print(f"[{timestamp}] [{scope}] {'*' * lead} {title} {'*' * (filler - lead)}")
    sys.stdout.flush()


def log_banner(
    migration: str,
    action: Optional[str] = None,
    note: Optional[str] = None,
    elapsed_ms: Optional[int] = None,
    desc: Optional[str] = None,
) -> None:
    """
    Log a single migration banner line.

    `action` is one of start / complete / skip / error. When `desc` is given
    the migration description is printed instead of an action line.
    """
    timestamp = datetime.now().strftime("%H:%M:%S")

    if desc:
        print(f"[{timestamp}] [MIGRATION] *** ^ {desc}")
        sys.stdout.flush()
        return

    label = ACTION_LABELS.get(action or "", "")
    line = f"*** {migration} {'*' * max(30 - len(migration), 0)} {label}"
    if note:
        line += f" -- {note}"
    if elapsed_ms is not None:
        line += f" ({elapsed_ms}ms)"

    print(f"[{timestamp}] [MIGRATION] {line}")
    sys.stdout.flush()
