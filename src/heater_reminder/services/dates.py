"""Service date parsing and schedule derivation."""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from ..config import settings


def parse_service_date(value: object, formats: Optional[Sequence[str]] = None) -> Optional[date]:
    """Parse a slot value into a calendar date; anything unparsable yields ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in formats or settings.date_formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def add_months(base: date, months: int) -> date:
    """Return ``base`` shifted by ``months`` calendar months.

    Days past the end of the target month roll into the following month,
    so Aug 31 + 6 months is Mar 3 (Mar 2 in a leap year).
    """

    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    overflow = base.day - monthrange(year, month)[1]
    if overflow <= 0:
        return date(year, month, base.day)
    return date(year, month, monthrange(year, month)[1]) + timedelta(days=overflow)


def _valid_dates(values: Iterable[object]) -> list[date]:
    parsed = (parse_service_date(value) for value in values)
    return [item for item in parsed if item is not None]


def last_service_date(services: Mapping[int, str]) -> Optional[date]:
    dates = _valid_dates(services.values())
    return max(dates) if dates else None


def next_service_date(services: Mapping[int, str], interval_months: Optional[int] = None) -> Optional[date]:
    last = last_service_date(services)
    if last is None:
        return None
    return add_months(last, interval_months if interval_months is not None else settings.service_interval_months)


def days_until(target: Optional[date], today: date) -> Optional[int]:
    if target is None:
        return None
    return (target - today).days
