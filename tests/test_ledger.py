import sys
from decimal import Decimal
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from studio.core.ledger import (
    BOOKING_LEDGER,
    CLIENT_LEDGER,
    STAFF_LEDGER,
    event_amount,
    events_for_staff,
    expense_totals,
)
from studio.core.schema import (
    ClientPaymentRecord,
    Event,
    Expense,
    Staff,
    StaffAssignment,
    StaffPaymentRecord,
)


def _staff_payment(record_id, staff_id, kind, amount, payment_date="2024-03-01", event_id=None):
    return StaffPaymentRecord(
        id=record_id,
        staff_id=staff_id,
        type=kind,
        amount=amount,
        payment_date=payment_date,
        event_id=event_id,
    )


def test_summary_totals_and_due():
    records = [
        _staff_payment("p1", "A", "agreed", 5000),
        _staff_payment("p2", "A", "made", 2000),
        _staff_payment("p3", "A", "made", 1000),
        _staff_payment("p4", "B", "agreed", 9999),
    ]

    summary = STAFF_LEDGER.summary("A", "Arjun", records)

    assert summary.total_agreed == Decimal("5000")
    assert summary.total_paid == Decimal("3000")
    assert summary.total_due == Decimal("2000")
    assert summary.total_due == summary.total_agreed - summary.total_paid


def test_summary_without_records_is_all_zero():
    summary = STAFF_LEDGER.summary("ghost", "Ghost", [])
    assert (summary.total_agreed, summary.total_paid, summary.total_due) == (0, 0, 0)


def test_overpayment_keeps_negative_due():
    records = [
        _staff_payment("p1", "A", "agreed", 1000),
        _staff_payment("p2", "A", "made", 1500),
    ]
    assert STAFF_LEDGER.due("A", records) == Decimal("-500")


def test_malformed_amounts_count_as_zero():
    records = [
        _staff_payment("p1", "A", "agreed", "abc"),
        _staff_payment("p2", "A", "agreed", None),
        _staff_payment("p3", "A", "agreed", "2500.50"),
        _staff_payment("p4", "A", "made", "NaN"),
    ]
    summary = STAFF_LEDGER.summary("A", "Arjun", records)
    assert summary.total_agreed == Decimal("2500.50")
    assert summary.total_paid == Decimal("0")


def test_top_n_orders_by_due_then_agreed_then_name():
    staff = [
        Staff(id="s-bob", name="Bob"),
        Staff(id="s-zed", name="Zed"),
        Staff(id="s-dan", name="Dan"),
        Staff(id="s-alice", name="alice"),
        Staff(id="s-eve", name="Eve"),
    ]
    records = [
        _staff_payment("1", "s-bob", "agreed", 5000),
        _staff_payment("2", "s-bob", "made", 4000),
        _staff_payment("3", "s-alice", "agreed", 5000),
        _staff_payment("4", "s-alice", "made", 4000),
        _staff_payment("5", "s-dan", "agreed", 3000),
        _staff_payment("6", "s-dan", "made", 2000),
        _staff_payment("7", "s-eve", "agreed", 2000),
    ]

    ranked = STAFF_LEDGER.top_n(staff, records)

    assert [item.name for item in ranked] == ["Eve", "alice", "Bob", "Dan"]
    assert all(item.id != "s-zed" for item in ranked)


def test_top_n_respects_limit_and_keeps_paid_only_subjects():
    staff = [Staff(id=f"s{i}", name=f"Staff {i}") for i in range(12)]
    records = [_staff_payment(f"r{i}", f"s{i}", "agreed", 1000 + i) for i in range(11)]
    records.append(_staff_payment("paid-only", "s11", "made", 300))

    ranked = STAFF_LEDGER.top_n(staff, records, n=10)
    assert len(ranked) == 10
    assert ranked[0].id == "s10"

    everyone = STAFF_LEDGER.top_n(staff, records, n=20)
    assert everyone[-1].id == "s11"
    assert everyone[-1].total_due == Decimal("-300")


def test_event_amount_sums_only_agreed_records_of_pair():
    records = [
        _staff_payment("1", "A", "agreed", 3000, event_id="e1"),
        _staff_payment("2", "A", "agreed", 500, event_id="e1"),
        _staff_payment("3", "A", "made", 700, event_id="e1"),
        _staff_payment("4", "A", "agreed", 900, event_id="e2"),
        _staff_payment("5", "B", "agreed", 100, event_id="e1"),
    ]
    assert event_amount("A", "e1", records) == Decimal("3500")
    assert event_amount("A", "e9", records) == Decimal("0")


def test_events_for_staff_deduplicates_and_sorts_by_date():
    events = [
        Event(id="e1", booking_id="b1", event_name="Reception", event_date="2024-05-20"),
        Event(id="e2", booking_id="b1", event_name="Haldi", event_date="2024-05-18"),
        Event(id="e3", booking_id="b2", event_name="Engagement", event_date="2024-04-01"),
    ]
    assignments = [
        StaffAssignment(id="a1", event_id="e1", staff_id="A", role="photographer"),
        StaffAssignment(id="a2", event_id="e1", staff_id="A", role="editor"),
        StaffAssignment(id="a3", event_id="e2", staff_id="A", role="photographer"),
        StaffAssignment(id="a4", event_id="e3", staff_id="B", role="photographer"),
        StaffAssignment(id="a5", event_id="missing", staff_id="A", role="photographer"),
    ]
    payments = [_staff_payment("1", "A", "agreed", 4000, event_id="e1")]

    rows = events_for_staff("A", events, assignments, payments)

    assert [row.event_id for row in rows] == ["e2", "e1"]
    assert rows[0].amount == Decimal("0")
    assert rows[1].amount == Decimal("4000")
    assert rows[1].event_name == "Reception"


def test_payment_history_most_recent_first_and_stable():
    records = [
        _staff_payment("old", "A", "agreed", 1, payment_date="2024-01-01"),
        _staff_payment("tie-1", "A", "made", 1, payment_date="2024-02-01"),
        _staff_payment("other", "B", "made", 1, payment_date="2024-03-01"),
        _staff_payment("tie-2", "A", "made", 1, payment_date="2024-02-01"),
        _staff_payment("new", "A", "made", 1, payment_date="2024-02-15T10:30:00Z"),
    ]

    history = STAFF_LEDGER.payment_history("A", records)

    assert [record.id for record in history] == ["new", "tie-1", "tie-2", "old"]


def test_client_and_booking_ledgers_use_received_payments():
    payments = [
        ClientPaymentRecord(
            id="c1", client_id="cl1", booking_id="b1", amount=150000, payment_status="agreed", payment_date="2024-01-01"
        ),
        ClientPaymentRecord(
            id="c2", client_id="cl1", booking_id="b1", amount=50000, payment_status="received", payment_date="2024-01-05"
        ),
        ClientPaymentRecord(
            id="c3", client_id="cl1", booking_id="b2", amount=20000, payment_status="received", payment_date="2024-02-05"
        ),
    ]

    client = CLIENT_LEDGER.summary("cl1", "Meera", payments)
    assert client.total_agreed == Decimal("150000")
    assert client.total_paid == Decimal("70000")
    assert client.total_due == Decimal("80000")

    assert BOOKING_LEDGER.total_paid("b1", payments) == Decimal("50000")
    assert BOOKING_LEDGER.due("b2", payments) == Decimal("-20000")


def test_expense_totals_by_category():
    expenses = [
        Expense(id="x1", date="2024-01-01", amount=1200, category="travel"),
        Expense(id="x2", date="2024-01-02", amount="800.50", category="equipment"),
        Expense(id="x3", date="2024-01-03", amount=300, category="travel"),
    ]

    summary = expense_totals(expenses)

    assert summary.total == Decimal("2300.50")
    assert summary.by_category == {"travel": Decimal("1500"), "equipment": Decimal("800.50")}
