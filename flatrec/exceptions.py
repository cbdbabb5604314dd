"""
Custom exception hierarchy for flatrec.

Errors fall into two groups:
- Configuration errors are fatal for a mapper instance and are raised at
  construction time or on first use (e.g., no field names could be
  resolved, a property type has no registered converter).
- Per-line errors (quoting, arity, conversion) are fatal only for the
  line being processed. They never touch the shared mapper state, so
  the caller can report them and carry on with the next record.
"""

from __future__ import annotations


class FlatRecError(Exception):
    """Base exception for all flatrec errors."""


class ConfigurationError(FlatRecError):
    """Raised when a mapper or job cannot be configured.

    This can happen if:
    - No explicit field names were given and no header line was read.
    - A target property type has no converter in the registry.
    - Field indices are negative, duplicated, or inconsistent with names.
    - A configured field name has no matching property on the target type.
    """


class RecordParsingError(FlatRecError):
    """Raised when a single line cannot be split into fields."""

    def __init__(self, message: str, line: str | None = None) -> None:
        self.line = line
        super().__init__(message)


class QuotingError(RecordParsingError):
    """Raised when qualifier usage is inconsistent within a line.

    Either a field opens a qualifier without closing it (or the reverse),
    or the line mixes qualified and unqualified fields.
    """


class ArityError(RecordParsingError):
    """Raised when the token count does not match the expected field count."""

    def __init__(
        self, message: str, line: str | None = None, expected: int = 0, actual: int = 0
    ) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(message, line)


class ConversionError(FlatRecError):
    """Raised by a type converter when a raw value cannot be converted."""

    def __init__(self, message: str, value: str | None = None) -> None:
        self.value = value
        super().__init__(message)


class NullValueError(ConversionError):
    """The value to convert is ``None``."""


class EmptyValueError(ConversionError):
    """The value to convert is empty and the target type has no empty form."""


class MalformedValueError(ConversionError):
    """The value is not a valid literal of the target type."""


class RecordMappingError(FlatRecError):
    """Raised when a parsed record cannot be bound to the target object.

    Carries the identity of the offending field. The underlying
    ``ConversionError`` (or validation error) is chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        field_index: int | None = None,
        field_name: str | None = None,
        raw_content: str | None = None,
    ) -> None:
        self.field_index = field_index
        self.field_name = field_name
        self.raw_content = raw_content
        super().__init__(message)


class ExportError(FlatRecError):
    """Raised when mapped records cannot be written to disk."""
