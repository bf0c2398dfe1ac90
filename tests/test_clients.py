import sys
from decimal import Decimal
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from studio.core.clients import booking_rows, client_summary, outstanding_tier, top_clients
from studio.core.schema import Booking, Client, ClientPaymentRecord, Event, Severity

TODAY = "2024-06-15"

CLIENTS = [Client(id="c1", name="Meera"), Client(id="c2", name="arjun"), Client(id="c3", name="Zoya")]
BOOKINGS = [
    Booking(id="b1", client_id="c1", booking_name="Reception", package_amount=120000),
    Booking(id="b2", client_id="c1", booking_name="", package_amount=40000, created_at="2024-07-01T00:00:00"),
    Booking(id="b3", client_id="c2", booking_name="Engagement", package_amount=60000),
    Booking(id="b4", client_id="c3", booking_name="Wedding", package_amount=90000),
]
EVENTS = [
    Event(id="e1", booking_id="b1", event_date="2024-05-01"),
    Event(id="e2", booking_id="b1", event_date="2024-05-03"),
    Event(id="e3", booking_id="b3", event_date="2024-04-10"),
    Event(id="e4", booking_id="b4", event_date="2024-09-01"),
]


def _payment(record_id, booking_id, client_id, status, amount, payment_date="2024-03-01"):
    return ClientPaymentRecord(
        id=record_id,
        client_id=client_id,
        booking_id=booking_id,
        payment_status=status,
        amount=amount,
        payment_date=payment_date,
    )


PAYMENTS = [
    _payment("p1", "b1", "c1", "agreed", 120000),
    _payment("p2", "b1", "c1", "received", 50000),
    _payment("p3", "b2", "c1", "agreed", 40000),
    _payment("p4", "b3", "c2", "agreed", 60000),
    _payment("p5", "b3", "c2", "received", 60000),
    _payment("p6", "b4", "c3", "agreed", 90000),
]


def test_booking_rows_order_and_balances():
    rows = booking_rows("c1", BOOKINGS, EVENTS, PAYMENTS, today=TODAY)

    assert [row.booking_id for row in rows] == ["b1", "b2"]
    assert rows[0].due == Decimal("70000")
    assert rows[0].last_event_passed is True
    assert rows[1].booking_name == "Booking b2"
    assert rows[1].event_count == 0
    assert rows[1].last_event_passed is False


def test_outstanding_counts_only_finished_bookings_by_default():
    past = client_summary(CLIENTS[0], BOOKINGS, EVENTS, PAYMENTS, today=TODAY)
    everything = client_summary(CLIENTS[0], BOOKINGS, EVENTS, PAYMENTS, past_only=False, today=TODAY)

    assert past.outstanding == Decimal("70000")
    assert everything.outstanding == Decimal("110000")
    assert past.package_amount == Decimal("160000")
    assert past.first_event_date == "2024-05-01"


def test_top_clients_filters():
    past = top_clients(CLIENTS, BOOKINGS, EVENTS, PAYMENTS, which="past", today=TODAY)
    future = top_clients(CLIENTS, BOOKINGS, EVENTS, PAYMENTS, which="future", today=TODAY)
    everyone = top_clients(CLIENTS, BOOKINGS, EVENTS, PAYMENTS, which="all", today=TODAY)

    assert [item.id for item in past] == ["c1"]
    assert [item.id for item in future] == ["c3"]
    assert [item.id for item in everyone] == ["c1", "c3"]
    assert everyone[0].outstanding == Decimal("110000")


def test_outstanding_tiers():
    assert outstanding_tier(Decimal("-10")) is Severity.OK
    assert outstanding_tier(Decimal("0")) is Severity.OK
    assert outstanding_tier(Decimal("50000")) is Severity.WARNING
    assert outstanding_tier(Decimal("50001")) is Severity.CRITICAL
