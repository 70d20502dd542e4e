from .bridge import from_date, from_zoned, to_date, to_zoned
from .core import OccurrenceSequence, OccurrenceSeries
from .dates import DateSequence, DateSeries
from .engine import CompiledRules, OccurrenceCursor, ParseError, compile_rules
from .factory import (
    date_sequence,
    date_series,
    wrap_dates,
    wrap_zoned,
    zoned_sequence,
    zoned_series,
)
from .util import UTC, resolve_zone
from .values import DateTimeValue, DateValue, sort_key
from .zoned import ZonedSequence, ZonedSeries

__all__ = [
    "DateValue",
    "DateTimeValue",
    "sort_key",
    "to_date",
    "from_date",
    "to_zoned",
    "from_zoned",
    "compile_rules",
    "CompiledRules",
    "OccurrenceCursor",
    "ParseError",
    "OccurrenceSequence",
    "OccurrenceSeries",
    "DateSequence",
    "DateSeries",
    "ZonedSequence",
    "ZonedSeries",
    "date_sequence",
    "date_series",
    "zoned_sequence",
    "zoned_series",
    "wrap_dates",
    "wrap_zoned",
    "UTC",
    "resolve_zone",
]
