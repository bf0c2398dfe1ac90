import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from studio.core.settings import StudioSettings, configure_settings
from studio.core.validation import ValidationError, check_payment_entry, validate_client_payment, validate_staff_payment

TODAY = "2024-06-15"


@pytest.fixture(autouse=True)
def default_settings():
    configure_settings(StudioSettings())
    yield
    configure_settings(None)


def _staff_entry(**overrides):
    entry = {
        "staff_id": "s1",
        "type": "made",
        "amount": 5000,
        "payment_date": "2024-06-10",
        "payment_method": "UPI",
        "remarks": "",
    }
    entry.update(overrides)
    return entry


def test_valid_staff_payment_passes():
    validate_staff_payment(_staff_entry(), today=TODAY)


def test_payment_date_up_to_one_year_ahead():
    validate_staff_payment(_staff_entry(payment_date="2025-06-15"), today=TODAY)

    with pytest.raises(ValidationError) as excinfo:
        validate_staff_payment(_staff_entry(payment_date="2025-06-16"), today=TODAY)

    assert excinfo.value.errors == {"payment_date": "Date cannot be more than 1 year ahead"}


@pytest.mark.parametrize("amount", [0, -1, 1000000, "abc", None, ""])
def test_amount_outside_range_is_rejected(amount):
    with pytest.raises(ValidationError) as excinfo:
        validate_staff_payment(_staff_entry(amount=amount), today=TODAY)

    assert excinfo.value.errors["amount"] == "Amount must be between ₹1 and ₹9,99,999"


@pytest.mark.parametrize("amount", [1, "999999", 2500.75])
def test_amount_bounds_are_inclusive(amount):
    validate_staff_payment(_staff_entry(amount=amount), today=TODAY)


def test_made_payment_requires_method_but_agreed_does_not():
    with pytest.raises(ValidationError) as excinfo:
        validate_staff_payment(_staff_entry(payment_method="  "), today=TODAY)
    assert excinfo.value.errors == {"payment_method": "Payment method is required"}

    validate_staff_payment(_staff_entry(type="agreed", payment_method=None), today=TODAY)


def test_remarks_length_limit():
    validate_staff_payment(_staff_entry(remarks="x" * 200), today=TODAY)

    with pytest.raises(ValidationError) as excinfo:
        validate_staff_payment(_staff_entry(remarks="x" * 201), today=TODAY)
    assert excinfo.value.errors["remarks"] == "Remarks cannot exceed 200 characters"


def test_all_errors_are_collected():
    entry = _staff_entry(staff_id="", type="bonus", amount=0, payment_date="", remarks="x" * 300)

    with pytest.raises(ValidationError) as excinfo:
        validate_staff_payment(entry, today=TODAY)

    assert set(excinfo.value.errors) == {"staff_id", "type", "amount", "payment_date", "remarks"}
    assert "amount" in str(excinfo.value)


def test_malformed_payment_date():
    errors = check_payment_entry(
        amount=100,
        payment_date="15/06/2024",
        payment_method=None,
        remarks=None,
        method_required=False,
        today=TODAY,
    )
    assert errors == {"payment_date": "Payment date is invalid"}


def test_client_payment_rules():
    entry = {
        "booking_id": "b1",
        "payment_status": "received",
        "amount": 25000,
        "payment_date": "2024-06-01",
        "payment_method": "Bank Transfer",
    }
    validate_client_payment(entry, today=TODAY)
    validate_client_payment({**entry, "payment_status": "agreed", "payment_method": None}, today=TODAY)

    with pytest.raises(ValidationError) as excinfo:
        validate_client_payment({**entry, "booking_id": None, "payment_method": ""}, today=TODAY)
    assert set(excinfo.value.errors) == {"booking_id", "payment_method"}


def test_limits_follow_settings():
    configure_settings(StudioSettings(max_payment_amount=50000, remarks_max_length=10))

    with pytest.raises(ValidationError) as excinfo:
        validate_staff_payment(_staff_entry(amount=60000, remarks="x" * 11), today=TODAY)

    assert excinfo.value.errors == {
        "amount": "Amount must be between ₹1 and ₹50,000",
        "remarks": "Remarks cannot exceed 10 characters",
    }
