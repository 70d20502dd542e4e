"""Conversions between engine date-values and the standard temporal types.

The engine speaks in `DateValue` (whole day) and `DateTimeValue` (UTC
instant). Consumers see `datetime.date` and aware `datetime.datetime`.
"""

from datetime import date, datetime, tzinfo

from calseries.util import UTC
from calseries.values import DateTimeValue, DateValue


def to_date(value: DateValue) -> date:
    """Calendar day of a date-value; time fields, if any, are dropped."""
    return date(value.year, value.month, value.day)


def from_date(value: date) -> DateValue:
    """Whole-day date-value for a calendar day.

    No time fields are synthesized, so advancing a cursor to the result never
    skips an occurrence that falls on that same day.
    """
    return DateValue(year=value.year, month=value.month, day=value.day)


def to_zoned(value: DateValue, zone: tzinfo | None = None) -> datetime:
    """Aware datetime for a date-value, always labeled UTC.

    `zone` is accepted for symmetry with `from_zoned` but the result is not
    re-projected into it: engine output is reported in UTC. Whole-day values
    become midnight UTC.
    """
    if isinstance(value, DateTimeValue):
        return datetime(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            tzinfo=UTC,
        )
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


def from_zoned(value: datetime, zone: tzinfo | None = None) -> DateTimeValue:
    """Wall-clock fields of `value` as seen in `zone` (default: its own zone)."""
    if value.tzinfo is None:
        raise TypeError(
            f"Expected a timezone-aware datetime.\n"
            f"Got naive datetime: {value!r}\n"
            f"Hint: Add timezone info:\n"
            f"  from zoneinfo import ZoneInfo\n"
            f"  dt = datetime(..., tzinfo=ZoneInfo('UTC'))"
        )
    shifted = value.astimezone(zone) if zone is not None else value
    return DateTimeValue(
        year=shifted.year,
        month=shifted.month,
        day=shifted.day,
        hour=shifted.hour,
        minute=shifted.minute,
        second=shifted.second,
    )
