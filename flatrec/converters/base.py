"""
Base converter contract for flatrec.

Every converter turns the raw text of one field into a typed value.
The contract shared by all converters:

1. ``None`` input always fails with ``NullValueError``, even for types
   that could represent absence.
2. ``""`` fails with ``EmptyValueError`` unless the converter declares
   ``accepts_empty = True`` (strings; booleans, which map it to False).
3. Malformed input fails with ``MalformedValueError``; it is never
   silently coerced to a zero value.

Subclasses implement ``_convert()`` and only ever see non-null input
(and non-empty input unless they accept empty strings).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from flatrec.exceptions import EmptyValueError, MalformedValueError, NullValueError


class TypeConverter(ABC):
    """Abstract base class for field converters."""

    #: Python type produced by this converter (used in error messages).
    target_type: type = object

    #: Whether ``""`` is a legal input.
    accepts_empty: bool = False

    def convert(self, value: str | None) -> Any:
        """Convert a raw field value.

        Raises:
            NullValueError: If *value* is ``None``.
            EmptyValueError: If *value* is empty and not accepted.
            MalformedValueError: If *value* is not a valid literal.
        """
        if value is None:
            raise NullValueError(
                f"Value to convert to {self._type_name()} must not be None", value
            )
        if value == "" and not self.accepts_empty:
            raise EmptyValueError(
                f"Value to convert to {self._type_name()} must not be empty", value
            )
        return self._convert(value)

    @abstractmethod
    def _convert(self, value: str) -> Any:
        """Convert a non-null value."""

    def _type_name(self) -> str:
        return getattr(self.target_type, "__name__", str(self.target_type))

    def _malformed(self, value: str, reason: str | None = None) -> MalformedValueError:
        message = f"Cannot convert {value!r} to {self._type_name()}"
        if reason:
            message = f"{message}: {reason}"
        return MalformedValueError(message, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
