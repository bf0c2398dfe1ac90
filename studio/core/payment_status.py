from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from studio.core.ledger import BOOKING_LEDGER
from studio.core.money import format_amount, format_currency, round_whole
from studio.core.schema import Booking, ClientPaymentRecord, PaymentStatus, Severity

ZERO = Decimal("0")


def _describe(package: Decimal, outstanding: Decimal, render) -> str:
    if package == ZERO:
        return "No package amount"
    # balances that round to zero read as settled
    if round_whole(outstanding) == ZERO:
        return "Fully paid"
    if outstanding < ZERO:
        return f"Overpaid by {render(-outstanding)}"
    return f"{render(outstanding)} due"


def severity(package: Decimal, outstanding: Decimal, warning_ratio: Decimal = Decimal("0.3")) -> Severity:
    if package == ZERO:
        return Severity.NEUTRAL
    if round_whole(outstanding) <= ZERO:
        return Severity.OK
    if outstanding < package * warning_ratio:
        return Severity.WARNING
    return Severity.CRITICAL


def payment_status(
    package_amount: Decimal,
    received: Decimal,
    *,
    currency_prefix: str = "₹",
    warning_ratio: Decimal = Decimal("0.3"),
) -> PaymentStatus:
    """Describe how much of a package has been collected.

    ``message`` carries plain whole amounts (``"Overpaid by 20000"``) while
    ``display`` uses the currency prefix and grouping (``"Overpaid by ₹20,000"``).
    """

    outstanding = package_amount - received
    return PaymentStatus(
        package_amount=package_amount,
        received=received,
        outstanding=outstanding,
        message=_describe(package_amount, outstanding, format_amount),
        display=_describe(package_amount, outstanding, lambda value: format_currency(value, currency_prefix)),
        severity=severity(package_amount, outstanding, warning_ratio),
    )


def booking_payment_status(
    booking: Booking,
    payments: Iterable[ClientPaymentRecord],
    *,
    currency_prefix: str = "₹",
    warning_ratio: Decimal = Decimal("0.3"),
) -> PaymentStatus:
    received = BOOKING_LEDGER.total_paid(booking.id, payments)
    return payment_status(
        booking.package_amount,
        received,
        currency_prefix=currency_prefix,
        warning_ratio=warning_ratio,
    )
