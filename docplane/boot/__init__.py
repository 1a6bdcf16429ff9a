from docplane.boot.resolver import StageResolver, STAGES, MAX_PASSES

__all__ = ["StageResolver", "STAGES", "MAX_PASSES"]
