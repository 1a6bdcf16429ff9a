# docplane/core/context.py
"""
Boot context - per-runtime mutable state.

Holds what would otherwise be process-wide singletons:
- components permanently satisfied by a post-link bootstrap
- the compiled schema override cache
- the "waiting on migration" flag and its polling task
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class BootContext:
    satisfied_components: List[Any] = field(default_factory=list)
    override_cache: Optional[List[Any]] = None
    waiting_on_migration: bool = False
    waiting_task: Optional[asyncio.Task] = None

    def is_satisfied(self, component: Any) -> bool:
        return any(c is component for c in self.satisfied_components)

    def mark_satisfied(self, component: Any) -> None:
        if not self.is_satisfied(component):
            self.satisfied_components.append(component)

    def forget_component(self, component_id: str) -> None:
        self.satisfied_components = [
            c for c in self.satisfied_components
            if getattr(c, "id", None) != component_id
        ]

    def reset(self) -> None:
        """Drop all state. Cancels a pending migration wait loop."""
        if self.waiting_task is not None and not self.waiting_task.done():
            self.waiting_task.cancel()
        self.satisfied_components = []
        self.override_cache = None
        self.waiting_on_migration = False
        self.waiting_task = None
