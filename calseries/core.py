"""Base classes for the one-shot and restartable occurrence views."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, ClassVar, Generic, TypeVar

from typing_extensions import Self

from calseries.engine import CompiledRules, OccurrenceCursor
from calseries.values import DateValue

T = TypeVar("T", bound=date)


class OccurrenceSequence(ABC, Generic[T]):
    """One-shot, lazily converted view over an engine cursor.

    Sequences are read-only: occurrences can be pulled or skipped but never
    removed. Not safe for concurrent consumption.
    """

    def __init__(self, cursor: OccurrenceCursor):
        self._cursor: OccurrenceCursor = cursor

    @abstractmethod
    def _convert(self, value: DateValue) -> T:
        """Turn an engine occurrence into the consumer type."""
        pass

    @abstractmethod
    def _target(self, value: T) -> DateValue:
        """Turn a consumer value into an engine advance target."""
        pass

    def has_next(self) -> bool:
        return self._cursor.has_next()

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> T:
        return self._convert(next(self._cursor))

    def advance_to(self, target: T) -> None:
        """Skip ahead so the next occurrence is the first one at or after `target`.

        Never moves backwards; a target at or before the current position is a
        no-op.
        """
        self._cursor.advance_to(self._target(target))


class OccurrenceSeries(ABC, Generic[T]):
    """Restartable producer: every iteration starts a fresh sequence.

    The compiled rules are immutable and shared between iterations.
    """

    sequence_class: ClassVar[type[OccurrenceSequence[Any]]]

    def __init__(self, rules: CompiledRules):
        self.rules: CompiledRules = rules

    def __iter__(self) -> OccurrenceSequence[T]:
        return self.sequence_class(self.rules.produce())
