"""
Record predicates for flatrec.

A predicate answers ``test(record) -> bool`` for a raw ``Record``; the
optional ``negate`` flag inverts the answer after evaluation::

    result = not raw if negate else raw

Convention: ``True`` means the record is **filtered out**. The job runner
drops every record for which any predicate returns ``True``.

This convention explains the text predicates' raw semantics, which are
easy to get backwards:

- ``GrepPredicate("world")`` returns ``True`` when the payload does
  **not** contain ``"world"``. The runner therefore drops non-matching
  lines and keeps matching ones, like plain ``grep``.
  With ``negate=True`` it returns ``True`` for matching lines, so the
  runner keeps the non-matching ones, like ``grep -v``.
- ``StartsWithPredicate`` / ``EndsWithPredicate`` follow the same rule.

Numeric predicates are phrased positively:
``RecordNumberEqualsToPredicate(1, 2)`` returns ``True`` for records 1
and 2 (the runner drops them); ``negate=True`` drops every other record.

All predicates are stateless; evaluation depends only on the record.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from flatrec.config import FilterConfig
from flatrec.exceptions import ConfigurationError
from flatrec.records import Record


class RecordPredicate(ABC):
    """Base class: ``test()`` applies ``negate`` to ``_evaluate()``."""

    def __init__(self, negate: bool = False) -> None:
        self.negate = negate

    def test(self, record: Record) -> bool:
        result = self._evaluate(record)
        return not result if self.negate else result

    def __call__(self, record: Record) -> bool:
        return self.test(record)

    @abstractmethod
    def _evaluate(self, record: Record) -> bool:
        """Raw (non-negated) answer for *record*."""


# ---------------------------------------------------------------------------
# Payload predicates
# ---------------------------------------------------------------------------

class GrepPredicate(RecordPredicate):
    """``True`` iff the payload does NOT contain *pattern* (before negation)."""

    def __init__(self, pattern: str, negate: bool = False) -> None:
        super().__init__(negate)
        if not pattern:
            raise ConfigurationError("Grep pattern must not be empty")
        self.pattern = pattern

    def _evaluate(self, record: Record) -> bool:
        return self.pattern not in record.payload

    def __repr__(self) -> str:
        return f"GrepPredicate({self.pattern!r}, negate={self.negate})"


class StartsWithPredicate(RecordPredicate):
    """``True`` iff the payload starts with none of *prefixes*."""

    def __init__(self, *prefixes: str, negate: bool = False) -> None:
        super().__init__(negate)
        if not prefixes:
            raise ConfigurationError("At least one prefix is required")
        self.prefixes = tuple(prefixes)

    def _evaluate(self, record: Record) -> bool:
        return not record.payload.startswith(self.prefixes)


class EndsWithPredicate(RecordPredicate):
    """``True`` iff the payload ends with none of *suffixes*."""

    def __init__(self, *suffixes: str, negate: bool = False) -> None:
        super().__init__(negate)
        if not suffixes:
            raise ConfigurationError("At least one suffix is required")
        self.suffixes = tuple(suffixes)

    def _evaluate(self, record: Record) -> bool:
        return not record.payload.endswith(self.suffixes)


class EmptyRecordPredicate(RecordPredicate):
    """``True`` iff the payload is empty or whitespace only."""

    def _evaluate(self, record: Record) -> bool:
        return not record.payload.strip()


# ---------------------------------------------------------------------------
# Record number predicates
# ---------------------------------------------------------------------------

class RecordNumberEqualsToPredicate(RecordPredicate):
    """``True`` iff the record number is one of *numbers*."""

    def __init__(self, *numbers: int, negate: bool = False) -> None:
        super().__init__(negate)
        if not numbers:
            raise ConfigurationError("At least one record number is required")
        self.numbers = frozenset(numbers)

    def _evaluate(self, record: Record) -> bool:
        return record.number in self.numbers

    def __repr__(self) -> str:
        return f"RecordNumberEqualsToPredicate({sorted(self.numbers)}, negate={self.negate})"


class RecordNumberGreaterThanPredicate(RecordPredicate):
    """``True`` iff the record number is strictly greater than *number*."""

    def __init__(self, number: int, negate: bool = False) -> None:
        super().__init__(negate)
        self.number = number

    def _evaluate(self, record: Record) -> bool:
        return record.number > self.number


class RecordNumberLowerThanPredicate(RecordPredicate):
    """``True`` iff the record number is strictly lower than *number*."""

    def __init__(self, number: int, negate: bool = False) -> None:
        super().__init__(negate)
        self.number = number

    def _evaluate(self, record: Record) -> bool:
        return record.number < self.number


class RecordNumberBetweenPredicate(RecordPredicate):
    """``True`` iff ``lower <= number <= upper``."""

    def __init__(self, lower: int, upper: int, negate: bool = False) -> None:
        super().__init__(negate)
        if lower > upper:
            raise ConfigurationError(f"Lower bound {lower} is above upper bound {upper}")
        self.lower = lower
        self.upper = upper

    def _evaluate(self, record: Record) -> bool:
        return self.lower <= record.number <= self.upper


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def build_predicate(config: FilterConfig) -> RecordPredicate:
    """Create the predicate described by a ``FilterConfig``."""
    negate = config.negate
    kind = config.kind
    if kind == "grep":
        return GrepPredicate(config.pattern, negate=negate)
    if kind == "starts_with":
        return StartsWithPredicate(*config.patterns, negate=negate)
    if kind == "ends_with":
        return EndsWithPredicate(*config.patterns, negate=negate)
    if kind == "empty":
        return EmptyRecordPredicate(negate=negate)
    if kind == "record_number":
        return RecordNumberEqualsToPredicate(*config.numbers, negate=negate)
    if kind == "record_number_greater_than":
        return RecordNumberGreaterThanPredicate(config.lower, negate=negate)
    if kind == "record_number_lower_than":
        return RecordNumberLowerThanPredicate(config.upper, negate=negate)
    if kind == "record_number_between":
        return RecordNumberBetweenPredicate(config.lower, config.upper, negate=negate)
    raise ConfigurationError(f"Unknown filter kind: {kind!r}")
