"""Zone-aware datetime view over recurrence occurrences.

Occurrences are reported in UTC whatever the governing zone was: the engine
works in UTC and the view labels its output accordingly rather than
re-projecting it. Callers wanting local wall-clock times should call
`.astimezone(zone)` on each occurrence.

`advance_to` shifts its target into UTC before comparing, not into the
target's own zone. The engine compares UTC wall-clock fields, so this is what
keeps an occurrence at exactly the target instant from being skipped when the
target carries a non-UTC zone.
"""

from datetime import datetime

from typing_extensions import override

from calseries.bridge import from_zoned, to_zoned
from calseries.core import OccurrenceSequence, OccurrenceSeries
from calseries.util import UTC
from calseries.values import DateValue


class ZonedSequence(OccurrenceSequence[datetime]):
    """Yields aware `datetime` objects labeled UTC.

    Whole-day occurrences come out as midnight UTC of their day. Timed
    occurrences keep their exact UTC time of day.
    """

    @override
    def _convert(self, value: DateValue) -> datetime:
        return to_zoned(value, UTC)

    @override
    def _target(self, value: datetime) -> DateValue:
        # The engine compares in UTC, so the target is shifted there. A
        # whole-day occurrence ties with a midnight target and is kept.
        return from_zoned(value, UTC)


class ZonedSeries(OccurrenceSeries[datetime]):
    sequence_class = ZonedSequence
