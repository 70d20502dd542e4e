"""Neutral date-values emitted by the recurrence engine, and their ordering."""

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any


@dataclass(frozen=True, kw_only=True)
class DateValue:
    """A whole calendar day, as emitted by the recurrence engine."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        # date() rejects out-of-range fields for us
        _ = date(self.year, self.month, self.day)

    @classmethod
    def of(cls, value: date) -> "DateValue":
        return DateValue(year=value.year, month=value.month, day=value.day)

    def __str__(self) -> str:
        return f"{self.year:04d}{self.month:02d}{self.day:02d}"

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return sort_key(self) < sort_key(other)

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return sort_key(self) <= sort_key(other)

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return sort_key(self) > sort_key(other)

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, DateValue):
            return NotImplemented
        return sort_key(self) >= sort_key(other)


@dataclass(frozen=True, kw_only=True)
class DateTimeValue(DateValue):
    """A specific instant within a day, always expressed in UTC."""

    hour: int
    minute: int
    second: int

    def __post_init__(self) -> None:
        super().__post_init__()
        _ = time(self.hour, self.minute, self.second)

    @classmethod
    def of(cls, value: date) -> "DateTimeValue":
        """Build from an aware datetime, shifting it to UTC first."""
        if not isinstance(value, datetime):
            raise TypeError(
                f"DateTimeValue.of() needs a datetime, got {type(value).__name__!r}.\n"
                f"Hint: use DateValue.of() for whole calendar days"
            )
        if value.tzinfo is None:
            raise TypeError(
                f"DateTimeValue.of() needs a timezone-aware datetime.\n"
                f"Got naive datetime: {value!r}"
            )
        utc = value.astimezone(timezone.utc)
        return DateTimeValue(
            year=utc.year,
            month=utc.month,
            day=utc.day,
            hour=utc.hour,
            minute=utc.minute,
            second=utc.second,
        )

    def __str__(self) -> str:
        return (
            f"{super().__str__()}T{self.hour:02d}{self.minute:02d}{self.second:02d}Z"
        )


def sort_key(value: DateValue) -> tuple[int, int, int, int, int, int]:
    """Ordering key shared by every comparison between date-values.

    A whole-day value keys as that day's midnight: it sorts at-or-before every
    timed value on the same day and ties with a timed midnight.
    """
    if isinstance(value, DateTimeValue):
        return (
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
        )
    return (value.year, value.month, value.day, 0, 0, 0)
