from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Literal

from studio.core.dates import today_string
from studio.core.ledger import BOOKING_LEDGER, CLIENT_LEDGER
from studio.core.schema import (
    Booking,
    BookingLedgerRow,
    Client,
    ClientPaymentRecord,
    ClientSummary,
    Event,
    Severity,
)

ZERO = Decimal("0")

OutstandingFilter = Literal["past", "future", "all"]


def booking_rows(
    client_id: str,
    bookings: Iterable[Booking],
    events: Sequence[Event],
    payments: Sequence[ClientPaymentRecord],
    *,
    today: date | str | None = None,
) -> list[BookingLedgerRow]:
    """Per-booking balances of one client ordered by first event date."""

    today_str = today_string(today)
    rows: list[tuple[str, BookingLedgerRow]] = []
    for booking in bookings:
        if booking.client_id != client_id:
            continue
        dates = sorted(event.event_date for event in events if event.booking_id == booking.id)
        first = dates[0] if dates else None
        last = dates[-1] if dates else None
        agreed = BOOKING_LEDGER.total_agreed(booking.id, payments)
        received = BOOKING_LEDGER.total_paid(booking.id, payments)
        row = BookingLedgerRow(
            booking_id=booking.id,
            booking_name=booking.display_name,
            event_count=len(dates),
            first_event_date=first,
            last_event_date=last,
            last_event_passed=last is not None and last < today_str,
            agreed=agreed,
            received=received,
            due=agreed - received,
        )
        # bookings without events sort by their creation date
        rows.append((first or (booking.created_at or "")[:10], row))
    rows.sort(key=lambda item: item[0])
    return [row for _, row in rows]


def client_summary(
    client: Client,
    bookings: Sequence[Booking],
    events: Sequence[Event],
    payments: Sequence[ClientPaymentRecord],
    *,
    past_only: bool = True,
    today: date | str | None = None,
) -> ClientSummary:
    """Totals for one client.

    With ``past_only`` the outstanding figure only counts bookings whose last
    event is already behind us; otherwise it is agreed minus received.
    """

    rows = booking_rows(client.id, bookings, events, payments, today=today)
    package = sum((booking.package_amount for booking in bookings if booking.client_id == client.id), ZERO)
    agreed = CLIENT_LEDGER.total_agreed(client.id, payments)
    received = CLIENT_LEDGER.total_paid(client.id, payments)
    if past_only:
        outstanding = sum((row.due for row in rows if row.last_event_passed), ZERO)
    else:
        outstanding = agreed - received

    dates = [row.first_event_date for row in rows if row.first_event_date]
    dates += [row.last_event_date for row in rows if row.last_event_date]
    last = max(dates) if dates else None
    return ClientSummary(
        id=client.id,
        name=client.name,
        package_amount=package,
        total_agreed=agreed,
        total_received=received,
        outstanding=outstanding,
        first_event_date=min(dates) if dates else None,
        last_event_date=last,
        last_event_passed=last is not None and last < today_string(today),
    )


def top_clients(
    clients: Iterable[Client],
    bookings: Sequence[Booking],
    events: Sequence[Event],
    payments: Sequence[ClientPaymentRecord],
    *,
    which: OutstandingFilter = "past",
    n: int = 10,
    today: date | str | None = None,
) -> list[ClientSummary]:
    booked = {booking.client_id for booking in bookings}
    summaries = [
        client_summary(client, bookings, events, payments, past_only=which == "past", today=today)
        for client in clients
        if client.id in booked
    ]
    summaries = [
        item
        for item in summaries
        if (item.total_agreed != ZERO or item.total_received != ZERO) and item.outstanding > ZERO
    ]
    if which == "past":
        summaries = [item for item in summaries if item.last_event_passed]
    elif which == "future":
        summaries = [item for item in summaries if not item.last_event_passed]
    summaries.sort(key=lambda item: (-item.outstanding, -item.total_agreed, item.name.casefold()))
    return summaries[:n]


def outstanding_tier(outstanding: Decimal, warning_limit: Decimal = Decimal("50000")) -> Severity:
    if outstanding <= ZERO:
        return Severity.OK
    if outstanding <= warning_limit:
        return Severity.WARNING
    return Severity.CRITICAL


def client_history(client_id: str, payments: Iterable[ClientPaymentRecord]) -> list[ClientPaymentRecord]:
    return CLIENT_LEDGER.payment_history(client_id, payments)
