# core/dates.py

"""
CALENDAR HELPERS

All month windows are inclusive on both ends: [first day, last day].
Weeks start on Monday.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from django.utils import timezone


def today() -> date:
    return timezone.localdate()


def month_bounds(d: date) -> tuple[date, date]:
    last = calendar.monthrange(d.year, d.month)[1]
    return d.replace(day=1), d.replace(day=last)


def shift_month(d: date, months: int) -> date:
    """First day of the month `months` away from d's month."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def add_months(d: date, months: int) -> date:
    """Same day-of-month `months` away, clamped to the target month's length."""
    first = shift_month(d, months)
    last = calendar.monthrange(first.year, first.month)[1]
    return first.replace(day=min(d.day, last))


def month_year_key(d: date) -> str:
    """Salary period key, e.g. "March 2025"."""
    return f"{calendar.month_name[d.month]} {d.year}"


def parse_month(value: str | None, *, default: date | None = None) -> date:
    """
    Accepts "YYYY-MM" or "YYYY-MM-DD" and returns the first day of that month.
    """
    if not value:
        return month_bounds(default or today())[0]

    parts = str(value).strip().split("-")
    try:
        year, month = int(parts[0]), int(parts[1])
        return date(year, month, 1)
    except (IndexError, ValueError) as exc:
        raise ValueError("Invalid month (expected YYYY-MM)") from exc


def week_start(d: date) -> date:
    return d - timedelta(days=d.weekday())


def week_days(d: date) -> list[date]:
    start = week_start(d)
    return [start + timedelta(days=i) for i in range(7)]


def days_until(target: date | None, *, ref: date | None = None) -> int | None:
    if target is None:
        return None
    return (target - (ref or today())).days
