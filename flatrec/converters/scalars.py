"""
Scalar converters: str, int, float, Decimal, bool, Enum.

Integers use Python's arbitrary-precision ``int``, so values such as
``"123456789012345678901"`` convert without precision loss. No
thousand-separator, digit-grouping (``1_000``) or locale handling is done,
and surrounding whitespace is not ignored: a value either is a plain ASCII
literal of the target type or the conversion fails. Whitespace is the
tokenizer's business (``trim_whitespace``).
"""

from __future__ import annotations

import enum
import math
import re
from decimal import Decimal

from flatrec.converters.base import TypeConverter

# Tokens mapping to True, compared case-insensitively.
TRUE_VALUES = frozenset({"true", "1", "on", "yes"})

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
# No nan/inf, no digit separators
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class StringConverter(TypeConverter):
    """Identity conversion; the empty string is a legal value."""

    target_type = str
    accepts_empty = True

    def _convert(self, value: str) -> str:
        return value


class IntegerConverter(TypeConverter):
    target_type = int

    def _convert(self, value: str) -> int:
        if not _INTEGER_RE.fullmatch(value):
            raise self._malformed(value)
        try:
            return int(value)
        except ValueError as exc:
            # Beyond the interpreter's int digit limit
            raise self._malformed(value, str(exc)) from exc


class FloatConverter(TypeConverter):
    target_type = float

    def _convert(self, value: str) -> float:
        if not _NUMBER_RE.fullmatch(value):
            raise self._malformed(value)
        result = float(value)
        if not math.isfinite(result):
            raise self._malformed(value, "value overflows float")
        return result


class DecimalConverter(TypeConverter):
    target_type = Decimal

    def _convert(self, value: str) -> Decimal:
        if not _NUMBER_RE.fullmatch(value):
            raise self._malformed(value)
        return Decimal(value)


class BooleanConverter(TypeConverter):
    """Permissive boolean conversion.

    ``true``, ``1``, ``on`` and ``yes`` (any case) map to ``True``. Every
    other non-null input, including ``false``, ``0``, ``""`` and arbitrary
    text, maps to ``False``. Only ``None`` raises.
    """

    target_type = bool
    accepts_empty = True

    def _convert(self, value: str) -> bool:
        return value.strip().lower() in TRUE_VALUES


class EnumConverter(TypeConverter):
    """Converts to a member of an ``enum.Enum`` subclass.

    Looks the value up by member name first, then by member value
    (comparing against ``str(member.value)``).
    """

    def __init__(self, enum_type: type[enum.Enum]) -> None:
        self.target_type = enum_type

    def _convert(self, value: str) -> enum.Enum:
        members = self.target_type.__members__
        if value in members:
            return members[value]
        for member in self.target_type:
            if str(member.value) == value:
                return member
        raise self._malformed(value, f"expected one of {list(members)}")

    def __repr__(self) -> str:
        return f"EnumConverter({self.target_type.__name__})"
