"""Mutable state held by the in-memory record store."""
from __future__ import annotations

from dataclasses import dataclass, field

from studio.core.schema import (
    Booking,
    Client,
    ClientPaymentRecord,
    Event,
    Expense,
    Staff,
    StaffAssignment,
    StaffPaymentRecord,
    Workflow,
)


@dataclass(slots=True)
class StudioState:
    clients: list[Client] = field(default_factory=list)
    bookings: list[Booking] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    staff: list[Staff] = field(default_factory=list)
    assignments: list[StaffAssignment] = field(default_factory=list)
    workflows: list[Workflow] = field(default_factory=list)
    client_payments: list[ClientPaymentRecord] = field(default_factory=list)
    # keyed by record id, insertion order is creation order
    staff_payments: dict[str, StaffPaymentRecord] = field(default_factory=dict)
    expenses: list[Expense] = field(default_factory=list)
