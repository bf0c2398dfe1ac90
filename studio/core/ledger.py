"""Pure aggregation over payment records.

One :class:`Ledger` describes how a subject's records are selected (which
field holds the subject id, which record type counts as agreed and which as
paid). The same operations then serve staff, client and booking balances.
Nothing here raises for bad amounts: they were coerced to zero when the
snapshot was loaded.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Protocol

from studio.core.schema import (
    Event,
    EventAmount,
    Expense,
    ExpenseSummary,
    LedgerSummary,
    StaffAssignment,
    StaffPaymentRecord,
)

ZERO = Decimal("0")


class Subject(Protocol):
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Ledger:
    subject_field: str
    type_field: str
    agreed_type: str
    paid_type: str

    def records_for(self, subject_id: str, records: Iterable[Any]) -> list[Any]:
        return [record for record in records if getattr(record, self.subject_field) == subject_id]

    def _sum(self, subject_id: str, records: Iterable[Any], kind: str) -> Decimal:
        total = ZERO
        for record in self.records_for(subject_id, records):
            if getattr(record, self.type_field) == kind:
                total += record.amount
        return total

    def total_agreed(self, subject_id: str, records: Iterable[Any]) -> Decimal:
        return self._sum(subject_id, records, self.agreed_type)

    def total_paid(self, subject_id: str, records: Iterable[Any]) -> Decimal:
        return self._sum(subject_id, records, self.paid_type)

    def due(self, subject_id: str, records: Iterable[Any]) -> Decimal:
        """Agreed minus paid; negative when the subject was overpaid."""

        records = list(records)
        return self.total_agreed(subject_id, records) - self.total_paid(subject_id, records)

    def summary(self, subject_id: str, name: str, records: Iterable[Any]) -> LedgerSummary:
        records = list(records)
        agreed = self.total_agreed(subject_id, records)
        paid = self.total_paid(subject_id, records)
        return LedgerSummary(id=subject_id, name=name, total_agreed=agreed, total_paid=paid, total_due=agreed - paid)

    def top_n(self, subjects: Iterable[Subject], records: Iterable[Any], n: int = 10) -> list[LedgerSummary]:
        """Rank subjects by amount due, then agreed amount, then name.

        Subjects without a single agreed or paid amount are left out.
        """

        records = list(records)
        summaries = [self.summary(subject.id, subject.name, records) for subject in subjects]
        active = [item for item in summaries if item.total_agreed != ZERO or item.total_paid != ZERO]
        active.sort(key=lambda item: (-item.total_due, -item.total_agreed, item.name.casefold()))
        return active[:n]

    def payment_history(self, subject_id: str, records: Iterable[Any]) -> list[Any]:
        """Most recent first; records sharing a date keep their input order."""

        return sorted(self.records_for(subject_id, records), key=lambda record: record.payment_date, reverse=True)


STAFF_LEDGER = Ledger(subject_field="staff_id", type_field="type", agreed_type="agreed", paid_type="made")
CLIENT_LEDGER = Ledger(subject_field="client_id", type_field="payment_status", agreed_type="agreed", paid_type="received")
BOOKING_LEDGER = Ledger(subject_field="booking_id", type_field="payment_status", agreed_type="agreed", paid_type="received")


def event_amount(staff_id: str, event_id: str, payments: Iterable[StaffPaymentRecord]) -> Decimal:
    return sum(
        (
            record.amount
            for record in payments
            if record.staff_id == staff_id and record.event_id == event_id and record.type == "agreed"
        ),
        ZERO,
    )


def events_for_staff(
    staff_id: str,
    events: Sequence[Event],
    assignments: Iterable[StaffAssignment],
    payments: Iterable[StaffPaymentRecord],
) -> list[EventAmount]:
    """Events the staff member works on with the agreed amount for each, by date."""

    payments = list(payments)
    events_by_id = {event.id: event for event in events}

    seen: set[str] = set()
    rows: list[EventAmount] = []
    for assignment in assignments:
        if assignment.staff_id != staff_id or assignment.event_id in seen:
            continue
        seen.add(assignment.event_id)
        event = events_by_id.get(assignment.event_id)
        if event is None:
            continue
        rows.append(
            EventAmount(
                event_id=event.id,
                event_name=event.event_name,
                event_date=event.event_date,
                booking_id=event.booking_id,
                amount=event_amount(staff_id, event.id, payments),
            )
        )
    rows.sort(key=lambda row: row.event_date)
    return rows


def expense_totals(expenses: Iterable[Expense]) -> ExpenseSummary:
    by_category: dict[str, Decimal] = {}
    total = ZERO
    for expense in expenses:
        total += expense.amount
        by_category[expense.category] = by_category.get(expense.category, ZERO) + expense.amount
    return ExpenseSummary(total=total, by_category=by_category)
