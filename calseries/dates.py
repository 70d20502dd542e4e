"""Calendar-date view over recurrence occurrences."""

from datetime import date

from typing_extensions import override

from calseries.bridge import from_date, to_date
from calseries.core import OccurrenceSequence, OccurrenceSeries
from calseries.values import DateValue


class DateSequence(OccurrenceSequence[date]):
    """Yields plain `date` objects; time of day, if any, is dropped."""

    @override
    def _convert(self, value: DateValue) -> date:
        return to_date(value)

    @override
    def _target(self, value: date) -> DateValue:
        # Whole-day target, so occurrences on that same day are never skipped
        return from_date(value)


class DateSeries(OccurrenceSeries[date]):
    sequence_class = DateSequence
