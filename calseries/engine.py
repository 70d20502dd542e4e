"""Recurrence engine: RFC 5545 content lines compiled into occurrence cursors.

Expansion is delegated to python-dateutil's rrule implementation. This module
only reads the content lines, normalizes their zones and hands out cursors
that emit `DateValue`/`DateTimeValue` occurrences in UTC.
"""

import logging
import textwrap
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, tzinfo

from dateutil.parser import isoparse
from dateutil.rrule import rrule, rruleset, rrulestr

from calseries.util import UTC, resolve_zone
from calseries.values import DateTimeValue, DateValue, sort_key

logger = logging.getLogger(__name__)

_RULE_PROPERTIES = ("RRULE", "EXRULE")
_DATE_PROPERTIES = ("RDATE", "EXDATE")
_SUB_DAILY = ("HOURLY", "MINUTELY", "SECONDLY")


class ParseError(ValueError):
    """A content line could not be compiled.

    Attributes:
        line: The offending content line, as given (after unfolding)
    """

    def __init__(self, message: str, line: str):
        super().__init__(message)
        self.line: str = line


class OccurrenceCursor(Iterator[DateValue]):
    """Read-only, forward-only cursor over compiled occurrences.

    Holds at most one pending occurrence; `has_next()` fills it without
    consuming it.
    """

    def __init__(self, occurrences: Iterable[datetime], *, whole_day: bool):
        self._source: Iterator[datetime] = iter(occurrences)
        self._whole_day: bool = whole_day
        self._pending: DateValue | None = None
        self._exhausted: bool = False

    def _fill(self) -> DateValue | None:
        if self._pending is None and not self._exhausted:
            try:
                occurrence = next(self._source)
            except StopIteration:
                self._exhausted = True
                return None
            if self._whole_day:
                self._pending = DateValue.of(occurrence.date())
            else:
                self._pending = DateTimeValue.of(occurrence)
        return self._pending

    def has_next(self) -> bool:
        return self._fill() is not None

    def __next__(self) -> DateValue:
        value = self._fill()
        if value is None:
            raise StopIteration
        self._pending = None
        return value

    def advance_to(self, target: DateValue) -> None:
        """Discard pending occurrences strictly before `target`."""
        key = sort_key(target)
        while (value := self._fill()) is not None and sort_key(value) < key:
            self._pending = None


@dataclass(frozen=True)
class CompiledRules:
    """An immutable compiled rule set; each `produce()` gives a fresh cursor."""

    start: datetime
    zone: tzinfo
    whole_day: bool
    rrules: tuple[rrule, ...] = ()
    exrules: tuple[rrule, ...] = ()
    rdates: tuple[datetime, ...] = ()
    exdates: tuple[datetime, ...] = ()

    def _ruleset(self) -> rruleset:
        rules = rruleset()
        # DTSTART is always the first instance of the series
        rules.rdate(self.start)
        for r in self.rrules:
            rules.rrule(r)
        for r in self.exrules:
            rules.exrule(r)
        for dt in self.rdates:
            rules.rdate(dt)
        for dt in self.exdates:
            rules.exdate(dt)
        return rules

    def produce(self) -> OccurrenceCursor:
        return OccurrenceCursor(self._ruleset(), whole_day=self.whole_day)

    def __iter__(self) -> OccurrenceCursor:
        return self.produce()


def compile_rules(
    text: str,
    start: DateValue,
    zone: tzinfo = UTC,
    *,
    strict: bool = False,
) -> CompiledRules:
    """
    Compile RRULE, EXRULE, RDATE and EXDATE content lines into a rule set.

    Args:
        text: Newline separated content lines. A bare "FREQ=..." line is read
            as an RRULE.
        start: First occurrence of the series. A `DateValue` gives a whole-day
            series; a `DateTimeValue` gives a timed series and holds the
            wall-clock time in `zone`.
        zone: Governing zone for RDATE/EXDATE values without a TZID or "Z"
        strict: Raise ParseError on the first malformed line instead of
            logging it and skipping it

    Returns:
        CompiledRules producing occurrences in UTC

    Raises:
        ParseError: If strict and a content line cannot be compiled
    """
    whole_day = not isinstance(start, DateTimeValue)
    if not whole_day:
        dtstart = datetime(
            start.year,
            start.month,
            start.day,
            start.hour,
            start.minute,
            start.second,
            tzinfo=zone,
        )
    else:
        dtstart = datetime(start.year, start.month, start.day)

    parts: dict[str, list] = {name: [] for name in _RULE_PROPERTIES + _DATE_PROPERTIES}
    for line in _unfold(text):
        try:
            name, params, value = _split_line(line)
            if name in _RULE_PROPERTIES:
                parts[name].append(_compile_rule(value, dtstart, zone, whole_day))
            else:
                parts[name].extend(_compile_dates(value, params, zone, whole_day))
        except (ValueError, KeyError, TypeError) as e:
            if strict:
                raise ParseError(
                    f"Cannot parse content line: {line!r}\n"
                    f"Reason: {e}\n"
                    f"Hint: Pass strict=False to skip malformed lines",
                    line,
                ) from e
            logger.warning("Skipping malformed content line %r: %s", line, e)

    compiled = CompiledRules(
        start=dtstart,
        zone=zone,
        whole_day=whole_day,
        rrules=tuple(parts["RRULE"]),
        exrules=tuple(parts["EXRULE"]),
        rdates=tuple(parts["RDATE"]),
        exdates=tuple(parts["EXDATE"]),
    )
    logger.debug(
        "Compiled %d rrule(s), %d exrule(s), %d rdate(s), %d exdate(s) from %s",
        len(compiled.rrules),
        len(compiled.exrules),
        len(compiled.rdates),
        len(compiled.exdates),
        start,
    )
    return compiled


def _unfold(text: str) -> list[str]:
    """Split text into content lines, joining RFC 5545 folded continuations."""
    lines: list[str] = []
    for raw in textwrap.dedent(text).splitlines():
        if raw[:1] in (" ", "\t") and lines:
            lines[-1] += raw[1:]
        elif raw.strip():
            lines.append(raw.strip())
    return lines


def _split_line(line: str) -> tuple[str, dict[str, str], str]:
    """Split `NAME;PARAM=VALUE:value` into its name, parameters and value."""
    if ":" not in line:
        if line.upper().startswith("FREQ="):
            return "RRULE", {}, line
        raise ValueError(f"missing ':' in content line {line!r}")

    head, value = line.split(":", 1)
    name, *raw_params = head.split(";")
    name = name.strip().upper()
    if name not in _RULE_PROPERTIES + _DATE_PROPERTIES:
        raise ValueError(
            f"unsupported property {name!r}, "
            f"expected one of {', '.join(_RULE_PROPERTIES + _DATE_PROPERTIES)}"
        )

    params: dict[str, str] = {}
    for param in raw_params:
        key, sep, param_value = param.partition("=")
        if not sep:
            raise ValueError(f"malformed parameter {param!r}")
        params[key.strip().upper()] = param_value.strip().strip('"')
    return name, params, value.strip()


def _compile_rule(
    value: str, dtstart: datetime, zone: tzinfo, whole_day: bool
) -> rrule:
    _check_rule_parts(value, whole_day)
    rule = rrulestr(_normalize_until(value, zone, whole_day), dtstart=dtstart)
    if not isinstance(rule, rrule):
        raise ValueError(f"expected a single recurrence rule, got {value!r}")
    return rule


def _check_rule_parts(value: str, whole_day: bool) -> None:
    """Reject rule parts dateutil would accept but cannot expand sensibly."""
    parts: dict[str, str] = {}
    for part in value.split(";"):
        key, _, raw = part.partition("=")
        parts[key.strip().upper()] = raw.strip().upper()

    freq = parts.get("FREQ")
    if not freq:
        raise ValueError(f"recurrence rule has no FREQ: {value!r}")
    if "INTERVAL" in parts:
        if not parts["INTERVAL"].isdigit() or int(parts["INTERVAL"]) < 1:
            raise ValueError(
                f"INTERVAL must be a positive integer, got {parts['INTERVAL']!r}"
            )
    if whole_day:
        # A DATE start only recurs on days (RFC 5545 section 3.3.10)
        if freq in _SUB_DAILY:
            raise ValueError(f"FREQ={freq} needs a DATE-TIME start")
        for key in ("BYHOUR", "BYMINUTE", "BYSECOND"):
            if key in parts:
                raise ValueError(f"{key} needs a DATE-TIME start")


def _normalize_until(value: str, zone: tzinfo, whole_day: bool) -> str:
    """Rewrite UNTIL so its awareness matches DTSTART, as dateutil requires.

    Whole-day series compare against naive midnights; timed series against
    UTC instants.
    """
    parts = value.split(";")
    for i, part in enumerate(parts):
        key, _, raw = part.partition("=")
        if key.strip().upper() != "UNTIL":
            continue
        until = _parse_stamp(raw, zone)
        if whole_day:
            if isinstance(until, datetime):
                until = until.astimezone(zone).date()
            parts[i] = f"UNTIL={until:%Y%m%d}"
        else:
            if not isinstance(until, datetime):
                until = datetime.combine(until, time(23, 59, 59), tzinfo=zone)
            parts[i] = f"UNTIL={until.astimezone(UTC):%Y%m%dT%H%M%S}Z"
    return ";".join(parts)


def _compile_dates(
    value: str, params: dict[str, str], zone: tzinfo, whole_day: bool
) -> list[datetime]:
    """Read the comma separated values of an RDATE or EXDATE line."""
    stamp_zone = resolve_zone(params["TZID"]) if "TZID" in params else zone
    kind = params.get("VALUE", "DATE-TIME").upper()
    if kind not in ("DATE", "DATE-TIME", "PERIOD"):
        raise ValueError(f"unsupported VALUE type {kind!r}")

    results: list[datetime] = []
    for raw in value.split(","):
        if kind == "PERIOD":
            # only the period start is an occurrence
            raw = raw.split("/", 1)[0]
        stamp = _parse_stamp(raw, stamp_zone)
        if kind == "DATE" and isinstance(stamp, datetime):
            raise ValueError(f"expected a DATE value, got {raw!r}")
        results.append(_coerce(stamp, zone, whole_day))
    return results


def _parse_stamp(raw: str, zone: tzinfo) -> date | datetime:
    """Parse a DATE or DATE-TIME value; floating times are placed in `zone`."""
    raw = raw.strip()
    if not raw:
        raise ValueError("empty date value")
    if "T" not in raw.upper():
        return isoparse(raw).date()
    stamp = isoparse(raw)
    if stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=zone)
    return stamp


def _coerce(stamp: date | datetime, zone: tzinfo, whole_day: bool) -> datetime:
    """Shape an explicit date to match the series it joins."""
    if whole_day:
        if isinstance(stamp, datetime):
            stamp = stamp.astimezone(zone).date()
        return datetime(stamp.year, stamp.month, stamp.day)
    if isinstance(stamp, datetime):
        return stamp
    return datetime.combine(stamp, time(), tzinfo=zone)
