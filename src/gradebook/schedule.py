"""Class-day expansion and grading-period windows."""
from datetime import date, datetime, timedelta

from gradebook.models import SemesterSettings, Weekday

_CLASS_WEEKDAYS = {int(day) for day in Weekday}


def as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def class_dates(start, end, weekdays) -> list[str]:
    """Every ISO date in [start, end] that falls on one of ``weekdays``.

    Args:
        start: First day of the window (date or ISO string).
        end: Last day of the window, inclusive.
        weekdays: Iterable of Weekday (or ``date.weekday()`` ints).

    Returns:
        Ascending list of ISO dates; empty when end < start or no weekdays.
    """
    scheduled = {int(day) for day in weekdays} & _CLASS_WEEKDAYS
    if not scheduled:
        return []
    current = as_date(start)
    last = as_date(end)
    dates = []
    while current <= last:
        if current.weekday() in scheduled:
            dates.append(current.isoformat())
        current += timedelta(days=1)
    return dates


def partial_window(settings: SemesterSettings, partial: int) -> tuple[date, date]:
    """Start and end (inclusive) of a grading period.

    Partial 2 starts the day after the first partial ends.
    """
    if partial == 1:
        return settings.semester_start, settings.first_partial_end
    if partial == 2:
        return settings.first_partial_end + timedelta(days=1), settings.semester_end
    raise ValueError(f"partial must be 1 or 2, got {partial!r}")


def semester_window(settings: SemesterSettings) -> tuple[date, date]:
    return settings.semester_start, settings.semester_end


def month_key(iso_date: str) -> str:
    """``YYYY-MM`` bucket for an ISO date."""
    return iso_date[:7]
