"""Tests for the factory entry points and zone resolution."""

import logging
from datetime import date, datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

import pytest

from calseries import (
    UTC,
    ParseError,
    date_sequence,
    date_series,
    resolve_zone,
)


def test_lenient_builds_from_valid_lines_only(caplog: pytest.LogCaptureFixture):
    """One malformed line among valid RRULE/RDATE lines is skipped silently."""
    text = "\n".join(
        [
            "RRULE:FREQ=DAILY;COUNT=2",
            "RDATE;VALUE=DATE:20240110",
            "RRULE:FREQ=DAILY;INTERVAL=zero",
        ]
    )

    with caplog.at_level(logging.WARNING):
        days = list(date_sequence(text, date(2024, 1, 1)))

    assert days == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 10)]
    assert "INTERVAL=zero" in caplog.text


def test_strict_fails_on_same_input():
    text = "\n".join(
        [
            "RRULE:FREQ=DAILY;COUNT=2",
            "RDATE;VALUE=DATE:20240110",
            "RRULE:FREQ=DAILY;INTERVAL=zero",
        ]
    )

    with pytest.raises(ParseError, match="INTERVAL=zero"):
        date_sequence(text, date(2024, 1, 1), strict=True)

    with pytest.raises(ParseError):
        date_series(text, date(2024, 1, 1), strict=True)


def test_date_series_governing_zone():
    """Zone-less and UTC RDATEs land on their day in the governing zone."""
    text = "RDATE:20240105T060000Z"

    utc_days = list(date_series(text, date(2024, 1, 1)))
    pacific_days = list(date_series(text, date(2024, 1, 1), tz="US/Pacific"))

    assert utc_days == [date(2024, 1, 1), date(2024, 1, 5)]
    assert pacific_days == [date(2024, 1, 1), date(2024, 1, 4)]


def test_date_start_from_datetime_drops_time():
    start = datetime(2024, 1, 1, 15, 0, tzinfo=timezone.utc)

    days = list(date_sequence("RRULE:FREQ=DAILY;COUNT=2", start))

    assert days == [date(2024, 1, 1), date(2024, 1, 2)]


def test_resolve_zone():
    assert resolve_zone(None) is UTC
    assert resolve_zone("UTC") is UTC
    assert resolve_zone("US/Pacific") == ZoneInfo("US/Pacific")

    berlin = ZoneInfo("Europe/Berlin")
    assert resolve_zone(berlin) is berlin
    assert resolve_zone(None, berlin) is berlin
    assert isinstance(resolve_zone("Asia/Tokyo"), tzinfo)


def test_resolve_zone_rejects_other_types():
    with pytest.raises(TypeError, match="IANA name"):
        resolve_zone(42)  # type: ignore[arg-type]
