"""
Converter registry for flatrec.

Maps a target type to the converter that produces it. Registration is
explicit: the mapper looks up the declared type of each bound property
once, when its bindings are built, and fails with ``ConfigurationError``
if no converter is registered for it.

``Optional[T]`` / ``T | None`` annotations resolve to the converter for
``T``; the null-input rule of the converter contract still applies.
"""

from __future__ import annotations

import datetime as dt
import enum
import logging
import types
import typing
from decimal import Decimal

import pandas as pd

from flatrec.converters.base import TypeConverter
from flatrec.converters.scalars import (
    BooleanConverter,
    DecimalConverter,
    EnumConverter,
    FloatConverter,
    IntegerConverter,
    StringConverter,
)
from flatrec.converters.temporal import (
    DEFAULT_DATE_FORMAT,
    DateConverter,
    DateTimeConverter,
    TimeConverter,
    TimestampConverter,
)
from flatrec.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def unwrap_optional(annotation: object) -> object:
    """Return ``T`` for ``Optional[T]`` / ``T | None``; otherwise the input."""
    origin = typing.get_origin(annotation)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


class ConverterRegistry:
    """Explicit target-type -> converter mapping."""

    def __init__(self, converters: dict[type, TypeConverter] | None = None) -> None:
        self._converters: dict[type, TypeConverter] = dict(converters or {})

    def register(self, target_type: type, converter: TypeConverter) -> None:
        """Bind *target_type* to *converter*, replacing any previous binding."""
        if not isinstance(converter, TypeConverter):
            raise ConfigurationError(
                f"Converter for {target_type!r} must be a TypeConverter, "
                f"got {type(converter).__name__}"
            )
        if target_type in self._converters:
            logger.debug("Replacing converter for %r", target_type)
        self._converters[target_type] = converter

    def register_enum(self, enum_type: type[enum.Enum]) -> None:
        """Register an ``EnumConverter`` for *enum_type*."""
        self.register(enum_type, EnumConverter(enum_type))

    def get(self, target_type: object) -> TypeConverter:
        """Return the converter for *target_type*.

        Raises:
            ConfigurationError: If no converter is registered.
        """
        resolved = unwrap_optional(target_type)
        try:
            return self._converters[resolved]  # type: ignore[index]
        except (KeyError, TypeError):
            raise ConfigurationError(
                f"No converter registered for type {resolved!r}. "
                f"Registered types: {sorted(self._type_names())}"
            ) from None

    def __contains__(self, target_type: object) -> bool:
        try:
            return unwrap_optional(target_type) in self._converters
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._converters)

    def copy(self) -> ConverterRegistry:
        return ConverterRegistry(self._converters)

    def _type_names(self) -> list[str]:
        return [getattr(t, "__name__", repr(t)) for t in self._converters]


def default_registry(
    date_format: str = DEFAULT_DATE_FORMAT,
    datetime_format: str | None = None,
) -> ConverterRegistry:
    """Build a registry with the built-in converters.

    Args:
        date_format: strptime format for ``datetime.date`` fields.
        datetime_format: strptime format for ``datetime.datetime`` and
            ``pandas.Timestamp`` fields; ``None`` means ISO-8601 / inferred.
    """
    return ConverterRegistry({
        str: StringConverter(),
        int: IntegerConverter(),
        float: FloatConverter(),
        Decimal: DecimalConverter(),
        bool: BooleanConverter(),
        dt.date: DateConverter(date_format),
        dt.datetime: DateTimeConverter(datetime_format),
        dt.time: TimeConverter(),
        pd.Timestamp: TimestampConverter(datetime_format),
    })
