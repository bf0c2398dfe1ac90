from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")


def to_amount(value: object) -> Decimal:
    """Coerce a stored amount to ``Decimal``; anything unusable counts as zero."""

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if value is None or isinstance(value, bool):
        return ZERO
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def round_whole(value: Decimal) -> Decimal:
    return value.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Integer-rounded amount without grouping, e.g. ``20000``."""

    return str(int(round_whole(value)))


def _group_indian(digits: str) -> str:
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups: list[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(value: Decimal, prefix: str = "₹") -> str:
    """Display form with the currency prefix and lakh/crore grouping."""

    whole = int(round_whole(value))
    sign = "-" if whole < 0 else ""
    return f"{sign}{prefix}{_group_indian(str(abs(whole)))}"
