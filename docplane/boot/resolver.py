# docplane/boot/resolver.py
"""
Stage resolver - boots registered components to a fixpoint.

Field definitions may reference collections that are registered later, so
instead of precomputing a dependency graph every component reports its own
readiness: boot(stage, pass_) returns nothing when ready, or one or more
reason strings when it needs another pass. Passes repeat until every
component is ready or the pass cap is reached.

A component that never becomes ready and a true dependency cycle look the
same: both end in DeadlockError after the last pass.
"""
import inspect
from typing import Any, List

from docplane.core.context import BootContext
from docplane.core.exceptions import DeadlockError
from docplane.core.logging import log

STAGES = ("compile", "link", "post-link")
POST_LINK = "post-link"
MAX_PASSES = 100


def _normalize_reasons(result: Any) -> List[str]:
    if not result:
        return []
    if isinstance(result, str):
        return [result]
    # A non-empty list is pending even when its entries are blank
    return [str(reason) for reason in result]


class StageResolver:
    def __init__(self, registry: Any, context: BootContext, max_passes: int = MAX_PASSES):
        self.registry = registry
        self.context = context
        self.max_passes = max_passes

    def _bootable(self) -> List[Any]:
        return [
            component for component in self.registry.components
            if callable(getattr(component, "boot", None)) and not self.context.is_satisfied(component)
        ]

    async def bootstrap(self, stage: str) -> int:
        """
        Run boot passes for `stage`. Returns the number of passes executed.

        Raises:
            ValueError for an unknown stage
            DeadlockError when components are still pending after max_passes
        """
        if stage not in STAGES:
            raise ValueError(f"Unknown boot stage: {stage}")

        pending = self._bootable()
        reasons: List[str] = []
        passes = 0

        while pending and passes < self.max_passes:
            passes += 1
            reasons = []
            still_pending = []

            for component in pending:
                result = component.boot(stage, passes)
                if inspect.isawaitable(result):
                    result = await result

                component_reasons = _normalize_reasons(result)
                if component_reasons:
                    reasons.extend(component_reasons)
                    still_pending.append(component)
                elif stage == POST_LINK:
                    self.context.mark_satisfied(component)

            pending = still_pending
            log("RESOLVER", f"{stage} pass {passes}: {len(pending)} component(s) pending")

        if pending:
            raise DeadlockError(
                stage,
                [getattr(c, "name", None) or getattr(c, "id", repr(c)) for c in pending],
                reasons,
                passes=self.max_passes,
            )

        return passes
