"""Tests for the zone-aware datetime view."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from calseries import (
    DateValue,
    ParseError,
    ZonedSequence,
    ZonedSeries,
    compile_rules,
    wrap_zoned,
    zoned_sequence,
    zoned_series,
)

UTC = timezone.utc


def test_daily_count_three_at_midnight_utc():
    """FREQ=DAILY;COUNT=3 from 2024-01-01T00:00Z yields three UTC midnights."""
    seq = zoned_sequence("FREQ=DAILY;COUNT=3", datetime(2024, 1, 1, tzinfo=UTC))

    result = list(seq)

    assert result == [
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 1, 2, tzinfo=UTC),
        datetime(2024, 1, 3, tzinfo=UTC),
    ]
    assert all(dt.utcoffset() == timedelta(0) for dt in result)
    assert not seq.has_next()


def test_output_is_labeled_utc_not_governing_zone():
    """Occurrences are reported in UTC even for a non-UTC start.

    This matches the long-standing behavior of the zoned view: the engine
    output is labeled UTC rather than re-projected into the start's zone.
    """
    pacific = ZoneInfo("US/Pacific")
    seq = zoned_sequence(
        "RRULE:FREQ=WEEKLY;BYDAY=MO;COUNT=2",
        datetime(2025, 1, 6, 9, 30, tzinfo=pacific),
    )

    first = next(seq)

    assert first.utcoffset() == timedelta(0)
    assert (first.hour, first.minute) == (17, 30)
    assert first == datetime(2025, 1, 6, 9, 30, tzinfo=pacific)
    assert first.astimezone(pacific).hour == 9


def test_advance_to_exact_instant_is_not_skipped():
    seq = zoned_sequence("RRULE:FREQ=DAILY;COUNT=3", datetime(2024, 1, 1, tzinfo=UTC))

    seq.advance_to(datetime(2024, 1, 2, tzinfo=UTC))

    assert next(seq) == datetime(2024, 1, 2, tzinfo=UTC)


def test_advance_to_after_instant_skips_that_day():
    seq = zoned_sequence("RRULE:FREQ=DAILY;COUNT=3", datetime(2024, 1, 1, tzinfo=UTC))

    seq.advance_to(datetime(2024, 1, 2, 0, 0, 1, tzinfo=UTC))

    assert next(seq) == datetime(2024, 1, 3, tzinfo=UTC)


def test_advance_to_target_in_other_zone_compares_instants():
    """A target in another zone is compared by instant, not by wall-clock."""
    berlin = ZoneInfo("Europe/Berlin")
    seq = zoned_sequence("RRULE:FREQ=DAILY;COUNT=3", datetime(2024, 1, 1, tzinfo=UTC))

    # 01:00 in Berlin on the 2nd is exactly midnight UTC on the 2nd
    seq.advance_to(datetime(2024, 1, 2, 1, 0, tzinfo=berlin))

    assert next(seq) == datetime(2024, 1, 2, tzinfo=UTC)


def test_whole_day_occurrences_become_midnight_utc():
    rules = compile_rules("RRULE:FREQ=DAILY;COUNT=2", DateValue(year=2024, month=1, day=1))

    seq = wrap_zoned(rules.produce())

    assert list(seq) == [
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 1, 2, tzinfo=UTC),
    ]


def test_whole_day_occurrence_kept_for_midnight_target():
    rules = compile_rules("RRULE:FREQ=DAILY;COUNT=3", DateValue(year=2024, month=1, day=1))
    seq = wrap_zoned(rules.produce())

    seq.advance_to(datetime(2024, 1, 2, tzinfo=UTC))

    assert next(seq) == datetime(2024, 1, 2, tzinfo=UTC)


def test_whole_day_occurrence_skipped_for_later_target():
    rules = compile_rules("RRULE:FREQ=DAILY;COUNT=3", DateValue(year=2024, month=1, day=1))
    seq = wrap_zoned(rules.produce())

    seq.advance_to(datetime(2024, 1, 2, 12, 0, tzinfo=UTC))

    assert next(seq) == datetime(2024, 1, 3, tzinfo=UTC)


def test_governing_zone_defaults_to_start_zone():
    """Zone-less RDATEs are read in the start's own zone."""
    berlin = ZoneInfo("Europe/Berlin")
    text = "RDATE:20240105T100000"

    result = list(zoned_sequence(text, datetime(2024, 1, 1, 10, tzinfo=berlin)))

    assert result == [
        datetime(2024, 1, 1, 9, tzinfo=UTC),
        datetime(2024, 1, 5, 9, tzinfo=UTC),
    ]


def test_explicit_governing_zone_shifts_start():
    """The start is moved into the governing zone before the rule is expanded."""
    # 2024-03-09 17:00Z is 09:00 Pacific; daily at 09:00 Pacific crosses DST
    start = datetime(2024, 3, 9, 17, 0, tzinfo=UTC)

    result = list(
        zoned_sequence("RRULE:FREQ=DAILY;COUNT=2", start, tz="US/Pacific")
    )

    assert result == [
        datetime(2024, 3, 9, 17, tzinfo=UTC),
        datetime(2024, 3, 10, 16, tzinfo=UTC),
    ]


def test_naive_start_rejected():
    with pytest.raises(TypeError, match="timezone-aware"):
        zoned_sequence("RRULE:FREQ=DAILY;COUNT=3", datetime(2024, 1, 1))


def test_strict_parse_error_at_construction():
    text = "RRULE:FREQ=DAILY;COUNT=3\nRDATE:2024-13-45T99"

    with pytest.raises(ParseError):
        zoned_sequence(text, datetime(2024, 1, 1, tzinfo=UTC), strict=True)

    lenient = zoned_sequence(text, datetime(2024, 1, 1, tzinfo=UTC))
    assert len(list(lenient)) == 3


def test_series_restarts_and_wraps():
    series = zoned_series("RRULE:FREQ=HOURLY;COUNT=3", datetime(2024, 1, 1, 8, tzinfo=UTC))

    assert isinstance(series, ZonedSeries)
    assert isinstance(iter(series), ZonedSequence)
    assert list(series) == list(series) == [
        datetime(2024, 1, 1, 8, tzinfo=UTC),
        datetime(2024, 1, 1, 9, tzinfo=UTC),
        datetime(2024, 1, 1, 10, tzinfo=UTC),
    ]


def test_sequence_has_no_remove():
    seq = zoned_sequence("RRULE:FREQ=DAILY;COUNT=3", datetime(2024, 1, 1, tzinfo=UTC))

    assert not hasattr(seq, "remove")
