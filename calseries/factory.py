"""Entry points turning recurrence content lines into occurrence sequences.

Rule text is compiled by `calseries.engine` (python-dateutil under the hood)
and the result is wrapped in the date or zoned view.
"""

from datetime import date, datetime, tzinfo

from calseries.bridge import from_date, from_zoned
from calseries.dates import DateSequence, DateSeries
from calseries.engine import CompiledRules, OccurrenceCursor, compile_rules
from calseries.util import UTC, resolve_zone
from calseries.zoned import ZonedSequence, ZonedSeries


def date_sequence(
    rules: str,
    start: date,
    *,
    tz: str | tzinfo | None = None,
    strict: bool = False,
) -> DateSequence:
    """
    Build a one-shot sequence of calendar dates.

    Args:
        rules: RRULE, EXRULE, RDATE and EXDATE content lines
        start: First occurrence of the series
        tz: Zone used for RDATE/EXDATE values without a TZID (default UTC)
        strict: Raise ParseError on malformed lines instead of skipping them

    Returns:
        DateSequence yielding `date` objects

    Example:
        >>> from datetime import date
        >>> from calseries import date_sequence
        >>>
        >>> days = date_sequence("RRULE:FREQ=DAILY;COUNT=3", date(2024, 1, 1))
        >>> list(days)
        [datetime.date(2024, 1, 1), datetime.date(2024, 1, 2), datetime.date(2024, 1, 3)]
    """
    return DateSequence(_compile_dates(rules, start, tz, strict).produce())


def date_series(
    rules: str,
    start: date,
    *,
    tz: str | tzinfo | None = None,
    strict: bool = False,
) -> DateSeries:
    """
    Build a restartable series of calendar dates.

    Takes the same arguments as `date_sequence`. Each `iter()` call on the
    result starts over from the first occurrence.

    Example:
        >>> paydays = date_series(
        ...     "RRULE:FREQ=MONTHLY;BYMONTHDAY=1,15", date(2025, 1, 1)
        ... )
        >>> from itertools import islice
        >>> list(islice(paydays, 2))
        [datetime.date(2025, 1, 1), datetime.date(2025, 1, 15)]
    """
    return DateSeries(_compile_dates(rules, start, tz, strict))


def zoned_sequence(
    rules: str,
    start: datetime,
    *,
    tz: str | tzinfo | None = None,
    strict: bool = False,
) -> ZonedSequence:
    """
    Build a one-shot sequence of zone-aware datetimes.

    Args:
        rules: RRULE, EXRULE, RDATE and EXDATE content lines
        start: First occurrence of the series (timezone-aware)
        tz: Governing zone; the rule is expanded in this zone's wall-clock
            time and it resolves RDATE/EXDATE values without a TZID.
            Defaults to `start`'s own zone.
        strict: Raise ParseError on malformed lines instead of skipping them

    Returns:
        ZonedSequence yielding datetimes labeled UTC

    Example:
        >>> from zoneinfo import ZoneInfo
        >>> standup = zoned_sequence(
        ...     "RRULE:FREQ=WEEKLY;BYDAY=MO;COUNT=2",
        ...     datetime(2025, 1, 6, 9, 30, tzinfo=ZoneInfo("US/Pacific")),
        ... )
        >>> [str(dt) for dt in standup]
        ['2025-01-06 17:30:00+00:00', '2025-01-13 17:30:00+00:00']
    """
    return ZonedSequence(_compile_zoned(rules, start, tz, strict).produce())


def zoned_series(
    rules: str,
    start: datetime,
    *,
    tz: str | tzinfo | None = None,
    strict: bool = False,
) -> ZonedSeries:
    """
    Build a restartable series of zone-aware datetimes.

    Takes the same arguments as `zoned_sequence`.
    """
    return ZonedSeries(_compile_zoned(rules, start, tz, strict))


def wrap_dates(source: OccurrenceCursor | CompiledRules) -> DateSequence | DateSeries:
    """Wrap an already compiled cursor (or rule set) in the date view."""
    if isinstance(source, CompiledRules):
        return DateSeries(source)
    return DateSequence(source)


def wrap_zoned(
    source: OccurrenceCursor | CompiledRules,
) -> ZonedSequence | ZonedSeries:
    """Wrap an already compiled cursor (or rule set) in the zoned view."""
    if isinstance(source, CompiledRules):
        return ZonedSeries(source)
    return ZonedSequence(source)


def _compile_dates(
    rules: str, start: date, tz: str | tzinfo | None, strict: bool
) -> CompiledRules:
    zone = resolve_zone(tz, UTC)
    return compile_rules(rules, from_date(start), zone, strict=strict)


def _compile_zoned(
    rules: str, start: datetime, tz: str | tzinfo | None, strict: bool
) -> CompiledRules:
    if not isinstance(start, datetime) or start.tzinfo is None:
        raise TypeError(
            f"Zoned sequences need a timezone-aware datetime start.\n"
            f"Got: {start!r}\n"
            f"Hint: Add timezone info:\n"
            f"  from zoneinfo import ZoneInfo\n"
            f"  start = datetime(..., tzinfo=ZoneInfo('UTC'))\n"
            f"For calendar dates use date_sequence() instead"
        )
    zone = resolve_zone(tz, start.tzinfo)
    # The engine reads the start as wall-clock time in the governing zone
    return compile_rules(rules, from_zoned(start, zone), zone, strict=strict)
