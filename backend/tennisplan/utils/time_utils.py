from __future__ import annotations

from datetime import date, time, timedelta
import re

from ..core.constants import DAYS_OF_WEEK_SHORT

MONTH_REGEX = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def time_to_minutes(t: time) -> int:
    """Convert time to minutes since midnight."""
    return t.hour * 60 + t.minute


def duration_minutes(start: time, end: time) -> int:
    """Minutes between two times of the same day; never negative."""
    return max(0, time_to_minutes(end) - time_to_minutes(start))


def time_to_hhmm(t: time) -> str:
    return t.strftime("%H:%M")


def start_of_week(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_days(week_start: date) -> list[date]:
    return [week_start + timedelta(days=offset) for offset in range(7)]


def format_short(day: date) -> str:
    """Format a date as ``Mo 03.06.``."""
    return f"{DAYS_OF_WEEK_SHORT[day.weekday()]} {day.day:02d}.{day.month:02d}."


def parse_month(value: str) -> tuple[date, date]:
    """
    Parse a ``YYYY-MM`` billing month.

    Returns:
        (first day of month, first day of following month)

    Raises:
        ValueError: if the value is not a valid month string
    """
    match = MONTH_REGEX.fullmatch((value or "").strip())
    if not match:
        raise ValueError(f"Invalid month: {value!r}. Expected YYYY-MM.")
    year, month = int(match.group(1)), int(match.group(2))
    first = date(year, month, 1)
    following = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return first, following


def weekly_dates(first: date, until: date) -> list[date]:
    """Every seventh day from ``first`` through ``until`` inclusive."""
    dates: list[date] = []
    current = first
    while current <= until:
        dates.append(current)
        current += timedelta(days=7)
    return dates
