from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from decimal import Decimal, InvalidOperation

from studio.core.dates import add_years, normalize_date, today_string
from studio.core.money import format_currency
from studio.core.settings import StudioSettings, get_settings


class ValidationError(Exception):
    """Raised when a payment entry breaks one or more rules.

    ``errors`` maps the offending field to a human readable message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


def _parse_amount(value: object) -> Decimal | None:
    if value is None or isinstance(value, bool) or value == "":
        return None
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return amount if amount.is_finite() else None


def check_payment_entry(
    *,
    amount: object,
    payment_date: object,
    payment_method: str | None,
    remarks: str | None,
    method_required: bool,
    today: date | str | None = None,
    settings: StudioSettings | None = None,
) -> dict[str, str]:
    settings = settings or get_settings()
    errors: dict[str, str] = {}

    parsed = _parse_amount(amount)
    if parsed is None or not (settings.min_payment_amount <= parsed <= settings.max_payment_amount):
        low = format_currency(settings.min_payment_amount, settings.currency_prefix)
        high = format_currency(settings.max_payment_amount, settings.currency_prefix)
        errors["amount"] = f"Amount must be between {low} and {high}"

    if not payment_date:
        errors["payment_date"] = "Payment date is required"
    else:
        try:
            normalized = normalize_date(payment_date)
        except ValueError:
            errors["payment_date"] = "Payment date is invalid"
        else:
            horizon = add_years(today_string(today), settings.payment_horizon_years)
            if normalized > horizon:
                errors["payment_date"] = f"Date cannot be more than {settings.payment_horizon_years} year ahead"

    if method_required and not (payment_method or "").strip():
        errors["payment_method"] = "Payment method is required"

    if remarks and len(remarks) > settings.remarks_max_length:
        errors["remarks"] = f"Remarks cannot exceed {settings.remarks_max_length} characters"

    return errors


def validate_staff_payment(entry: Mapping[str, object], *, today: date | str | None = None) -> None:
    errors: dict[str, str] = {}
    if not entry.get("staff_id"):
        errors["staff_id"] = "Staff member is required"
    if entry.get("type") not in {"agreed", "made"}:
        errors["type"] = "Payment type must be agreed or made"
    errors.update(
        check_payment_entry(
            amount=entry.get("amount"),
            payment_date=entry.get("payment_date"),
            payment_method=entry.get("payment_method"),  # type: ignore[arg-type]
            remarks=entry.get("remarks"),  # type: ignore[arg-type]
            method_required=entry.get("type") == "made",
            today=today,
        )
    )
    if errors:
        raise ValidationError(errors)


def validate_client_payment(entry: Mapping[str, object], *, today: date | str | None = None) -> None:
    errors: dict[str, str] = {}
    if not entry.get("booking_id"):
        errors["booking_id"] = "Please select a booking"
    if entry.get("payment_status") not in {"agreed", "received"}:
        errors["payment_status"] = "Payment status must be agreed or received"
    errors.update(
        check_payment_entry(
            amount=entry.get("amount"),
            payment_date=entry.get("payment_date"),
            payment_method=entry.get("payment_method"),  # type: ignore[arg-type]
            remarks=entry.get("remarks"),  # type: ignore[arg-type]
            method_required=entry.get("payment_status") == "received",
            today=today,
        )
    )
    if errors:
        raise ValidationError(errors)
