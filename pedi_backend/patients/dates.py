"""
Calendar date normalization.

Clients send dates as plain ``YYYY-MM-DD`` strings, as full ISO-8601
timestamps (typically a value read back from this API), or as
``date``/``datetime`` objects. All of them collapse to the same stored
form: the instant at midnight UTC of the calendar date. A value read
back and resubmitted therefore normalizes to itself.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone as dt_timezone

from django.utils.dateparse import parse_date, parse_datetime


def to_calendar_date(value) -> date | None:
    """Return the calendar date of ``value`` or None if it cannot be parsed.

    Datetimes are converted to UTC before the date is taken; naive
    datetimes are read as UTC. A datetime whose UTC equivalent falls
    outside the representable years is treated as unparseable.
    """
    if isinstance(value, datetime):
        try:
            return _utc(value).date()
        except OverflowError:
            return None
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        parsed_date = parse_date(text)
        if parsed_date is not None:
            return parsed_date
        parsed = parse_datetime(text)
        if parsed is None:
            return None
        return _utc(parsed).date()
    except (ValueError, OverflowError):
        # Well formed but out of range, e.g. 2023-02-30 or 0001-01-01T00:00:00+05:00
        return None


def midnight_utc(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=dt_timezone.utc)


def normalize_instant(value) -> datetime | None:
    day = to_calendar_date(value)
    if day is None:
        return None
    return midnight_utc(day)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(dt_timezone.utc)
