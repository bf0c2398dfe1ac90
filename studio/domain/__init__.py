"""Domain layer definitions."""

from .reconciliation import AmountEdit, BatchResult, ReconcileOutcome
from .studio import StudioState

__all__ = [
    "AmountEdit",
    "BatchResult",
    "ReconcileOutcome",
    "StudioState",
]
