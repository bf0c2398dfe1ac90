from __future__ import annotations

import calendar
import re
from datetime import date, datetime

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")


def normalize_date(value: object) -> str:
    """Return ``value`` as a ``YYYY-MM-DD`` string.

    Timestamps keep only their calendar part so that comparisons stay
    lexicographic on naive dates.
    """

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raw = str(value or "").strip()
    match = _DATE_RE.match(raw)
    if not match:
        raise ValueError(f"invalid calendar date: {value!r}")
    text = match.group(0)
    date.fromisoformat(text)
    return text


def today_string(today: date | str | None = None) -> str:
    if today is None:
        return date.today().isoformat()
    return normalize_date(today)


def add_years(value: str, years: int) -> str:
    parsed = date.fromisoformat(normalize_date(value))
    try:
        shifted = parsed.replace(year=parsed.year + years)
    except ValueError:  # 29 February
        shifted = parsed.replace(year=parsed.year + years, day=28)
    return shifted.isoformat()


def add_months(value: str, months: int) -> str:
    """Shift ``value`` by whole months, clamping to the end of shorter months."""

    parsed = date.fromisoformat(normalize_date(value))
    index = parsed.year * 12 + parsed.month - 1 + months
    year, month = divmod(index, 12)
    day = min(parsed.day, calendar.monthrange(year, month + 1)[1])
    return date(year, month + 1, day).isoformat()


def month_end(year: int, month: int) -> str:
    return date(year, month, calendar.monthrange(year, month)[1]).isoformat()
