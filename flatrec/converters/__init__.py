"""
Converters sub-package for flatrec.

Turns the raw text of a field into a typed value. All converters share
one contract (see ``base.py``): ``None`` always fails, ``""`` fails unless
the target type has an empty form, malformed text fails rather than
being coerced.

- base.py: TypeConverter ABC.
- scalars.py: str, int, float, Decimal, bool, Enum.
- temporal.py: date, datetime, time, pandas.Timestamp.
- registry.py: ConverterRegistry and ``default_registry()``.
"""

from flatrec.converters.base import TypeConverter
from flatrec.converters.registry import ConverterRegistry, default_registry
from flatrec.converters.scalars import (
    BooleanConverter,
    DecimalConverter,
    EnumConverter,
    FloatConverter,
    IntegerConverter,
    StringConverter,
)
from flatrec.converters.temporal import (
    DateConverter,
    DateTimeConverter,
    TimeConverter,
    TimestampConverter,
)

__all__ = [
    "TypeConverter",
    "ConverterRegistry",
    "default_registry",
    "BooleanConverter",
    "DecimalConverter",
    "EnumConverter",
    "FloatConverter",
    "IntegerConverter",
    "StringConverter",
    "DateConverter",
    "DateTimeConverter",
    "TimeConverter",
    "TimestampConverter",
]
