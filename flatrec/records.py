"""
Plain data types shared by the tokenizer, the mapper and the job runner.

- Record: one raw line as handed over by a record source, with its
  1-based sequence number.
- RawField: one token of a parsed line.
- FieldSpec: which token position feeds which target property.
- MappingResult: the outcome of mapping one line (object or error).

All types are frozen: a parsed line or a mapping outcome is never
modified after it has been produced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flatrec.exceptions import FlatRecError


@dataclass(frozen=True)
class Record:
    """A raw line and its sequence number in the source."""
    number: int
    payload: str


@dataclass(frozen=True)
class RawField:
    """A single token of a delimited line.

    Attributes:
        index: Position of the token in the line (0-based).
        raw_content: Token text with qualifiers stripped and whitespace
            trimmed if configured. Empty string for empty fields.
        name: Field name, once known. ``None`` straight out of the
            tokenizer; set by the mapper.
    """
    index: int
    raw_content: str
    name: str | None = None


@dataclass(frozen=True)
class FieldSpec:
    """Maps a token position to a target property name."""
    index: int
    name: str


@dataclass(frozen=True)
class MappingResult:
    """Outcome of mapping one line.

    Exactly one of ``value`` and ``error`` is set.
    """
    record: Record | None = None
    value: Any = None
    error: FlatRecError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """Return the mapped object, or raise the mapping error."""
        if self.error is not None:
            raise self.error
        return self.value
