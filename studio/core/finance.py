"""Studio-wide money overview and overdue client balances.

Bookings are selected by their events: a booking is ``past`` once its last
event is before today and ``active`` otherwise (including bookings that
have no events yet). A period keeps the bookings with at least one event
inside it and the expenses dated inside it.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Literal

from studio.core.dates import add_months, month_end, normalize_date, today_string
from studio.core.ledger import BOOKING_LEDGER
from studio.core.schema import (
    Booking,
    Client,
    ClientPaymentRecord,
    Event,
    Expense,
    FinanceSummary,
    OverdueBooking,
)

ZERO = Decimal("0")

FinanceTab = Literal["active", "past", "all"]
TimeRange = Literal["this-month", "this-quarter", "this-year", "all-time"]
OverduePeriod = Literal["3months", "6months", "1year", "all"]

_LOOKBACK_MONTHS = {"3months": 3, "6months": 6, "1year": 12}


def period_bounds(time_range: TimeRange, *, today: date | str | None = None) -> tuple[str | None, str | None]:
    """Calendar bounds of ``time_range`` around today; ``all-time`` is open."""

    current = date.fromisoformat(today_string(today))
    if time_range == "this-month":
        first_month = last_month = current.month
    elif time_range == "this-quarter":
        first_month = (current.month - 1) // 3 * 3 + 1
        last_month = first_month + 2
    elif time_range == "this-year":
        first_month, last_month = 1, 12
    else:
        return None, None
    return date(current.year, first_month, 1).isoformat(), month_end(current.year, last_month)


def overdue_since(period: OverduePeriod, *, today: date | str | None = None) -> str | None:
    months = _LOOKBACK_MONTHS.get(period)
    if months is None:
        return None
    return add_months(today_string(today), -months)


def _event_dates(booking_id: str, events: Iterable[Event]) -> list[str]:
    return sorted(event.event_date for event in events if event.booking_id == booking_id)


def _within(value: str, start: str | None, end: str | None) -> bool:
    return (start is None or value >= start) and (end is None or value <= end)


def finance_summary(
    bookings: Sequence[Booking],
    events: Sequence[Event],
    client_payments: Sequence[ClientPaymentRecord],
    expenses: Iterable[Expense],
    *,
    tab: FinanceTab = "all",
    start: date | str | None = None,
    end: date | str | None = None,
    today: date | str | None = None,
) -> FinanceSummary:
    """Agreed, received, expenses and net for the selected bookings.

    ``net`` is received minus expenses. Expenses are filtered by date only,
    not by booking.
    """

    today_str = today_string(today)
    start_str = normalize_date(start) if start is not None else None
    end_str = normalize_date(end) if end is not None else None
    bounded = start_str is not None or end_str is not None

    selected: set[str] = set()
    for booking in bookings:
        dates = _event_dates(booking.id, events)
        phase = "past" if dates and dates[-1] < today_str else "active"
        if tab != "all" and phase != tab:
            continue
        if bounded and not any(_within(value, start_str, end_str) for value in dates):
            continue
        selected.add(booking.id)

    payments = [record for record in client_payments if record.booking_id in selected]
    agreed = sum((BOOKING_LEDGER.total_agreed(booking_id, payments) for booking_id in selected), ZERO)
    received = sum((BOOKING_LEDGER.total_paid(booking_id, payments) for booking_id in selected), ZERO)
    spent = sum((expense.amount for expense in expenses if _within(expense.date, start_str, end_str)), ZERO)

    return FinanceSummary(
        start=start_str,
        end=end_str,
        booking_count=len(selected),
        agreed=agreed,
        received=received,
        expenses=spent,
        outstanding=agreed - received,
        net=received - spent,
    )


def overdue_bookings(
    clients: Iterable[Client],
    bookings: Iterable[Booking],
    events: Sequence[Event],
    client_payments: Sequence[ClientPaymentRecord],
    *,
    since: date | str | None = None,
    today: date | str | None = None,
) -> list[OverdueBooking]:
    """Finished bookings still owing money, largest balance first.

    A booking qualifies when its last event is before today and, with
    ``since``, on or after that date.
    """

    today_str = today_string(today)
    since_str = normalize_date(since) if since is not None else None
    client_names = {client.id: client.name for client in clients}

    overdue: list[OverdueBooking] = []
    for booking in bookings:
        dates = _event_dates(booking.id, events)
        if not dates:
            continue
        latest = dates[-1]
        if latest >= today_str or (since_str is not None and latest < since_str):
            continue
        agreed = BOOKING_LEDGER.total_agreed(booking.id, client_payments)
        received = BOOKING_LEDGER.total_paid(booking.id, client_payments)
        due = agreed - received
        if due <= ZERO:
            continue
        overdue.append(
            OverdueBooking(
                booking_id=booking.id,
                booking_name=booking.display_name,
                client_name=client_names.get(booking.client_id or "", "Unknown Client"),
                agreed=agreed,
                received=received,
                due=due,
                latest_event_date=latest,
            )
        )
    overdue.sort(key=lambda item: -item.due)
    return overdue
