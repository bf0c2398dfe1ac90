"""Value objects exchanged with the reconciliation service."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

Action = Literal["created", "updated", "removed", "unchanged", "failed"]


@dataclass(slots=True, frozen=True)
class AmountEdit:
    """A proposed agreed amount for one (staff, event) pair."""

    staff_id: str
    event_id: str
    amount: Decimal


@dataclass(slots=True)
class ReconcileOutcome:
    staff_id: str
    event_id: str
    action: Action
    amount: Decimal
    record_id: str | None = None
    removed_ids: list[str] = field(default_factory=list)
    stale_ids: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class BatchResult:
    outcomes: list[ReconcileOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[ReconcileOutcome]:
        return [outcome for outcome in self.outcomes if outcome.ok]

    @property
    def failed(self) -> list[ReconcileOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]
