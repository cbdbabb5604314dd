"""
Delimited record mapper for flatrec.

Turns one raw line into a populated target object in two steps:

1. ``parse(line)`` -> list of named ``RawField`` tokens. Without a field
   subset the token count must equal the number of field names; with a
   subset, only the referenced positions must exist and only those are
   returned.
2. ``map(fields)`` -> target object. Each field is converted with the
   converter registered for its property's declared type. The first
   failing field aborts the whole record; no partial object is returned.

``parse_and_map(line)`` combines both and reports per-line failures as a
``MappingResult`` instead of raising, which is what record-by-record
callers want.

Field names are fixed once per mapper: from the configuration at
construction, or from the first header line passed to ``read_header()``.
Everything else about the mapper is immutable, so one instance can map
any number of lines sequentially. It is not safe to share one instance
across threads while the header is still unresolved; build one mapper per
worker from the same (frozen) ``MapperConfig`` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from flatrec.binding import PropertyBinding, TargetSchema, build_bindings
from flatrec.config import MapperConfig
from flatrec.converters.registry import ConverterRegistry, default_registry
from flatrec.exceptions import (
    ArityError,
    ConfigurationError,
    ConversionError,
    RecordMappingError,
    RecordParsingError,
)
from flatrec.names import resolve_field_names, resolve_field_specs
from flatrec.records import FieldSpec, MappingResult, RawField, Record
from flatrec.tokenizer import DelimitedTokenizer

logger = logging.getLogger(__name__)


class RecordMapper:
    """Maps delimited lines to instances of one target type.

    Use ``build_mapper()`` to create instances.

    Attributes:
        config: The frozen ``MapperConfig``.
        tokenizer: Tokenizer built from the config.
        registry: Converter registry used to resolve property converters.
        schema: Properties of the target type.
    """

    def __init__(
        self,
        config: MapperConfig,
        target_type: type,
        registry: ConverterRegistry | None = None,
    ) -> None:
        self.config = config
        self.tokenizer = DelimitedTokenizer(
            delimiter=config.delimiter,
            qualifier=config.qualifier,
            trim_whitespace=config.trim_whitespace,
        )
        if registry is None:
            registry = default_registry(
                date_format=config.date_format,
                datetime_format=config.datetime_format,
            )
        self.registry = registry
        self.schema = TargetSchema.from_type(target_type)

        self._field_names: tuple[str, ...] | None = None
        self._bindings: tuple[PropertyBinding, ...] | None = None

        # Explicit names are validated against the target type right away
        if config.field_names:
            self._resolve(header_line=None)

    # -- Properties ---------------------------------------------------------

    @property
    def target_type(self) -> type:
        return self.schema.target_type

    @property
    def is_resolved(self) -> bool:
        """``True`` once field names are known."""
        return self._bindings is not None

    @property
    def field_names(self) -> tuple[str, ...] | None:
        return self._field_names

    @property
    def field_specs(self) -> tuple[FieldSpec, ...] | None:
        if self._bindings is None:
            return None
        return tuple(b.spec for b in self._bindings)

    def __repr__(self) -> str:
        return (
            f"RecordMapper(target={self.target_type.__name__}, "
            f"delimiter={self.config.delimiter!r}, qualifier={self.config.qualifier!r}, "
            f"fields={list(self._field_names) if self._field_names else None})"
        )

    # -- Field name resolution ----------------------------------------------

    def read_header(self, line: str) -> tuple[str, ...]:
        """Resolve field names from a header line.

        Ignored (and the resolved names returned) if names are already
        known, either from configuration or from an earlier header.

        Raises:
            ConfigurationError: If the header names do not fit the target
                type or the configured field indices.
            QuotingError: If the header line is badly qualified.
        """
        if self._field_names is not None:
            logger.debug("Field names already resolved; ignoring header line %r", line)
            return self._field_names
        self._resolve(header_line=line)
        logger.info("Resolved %d field names from header", len(self._field_names))
        return self._field_names

    def _resolve(self, header_line: str | None) -> None:
        explicit = bool(self.config.field_names)
        names = resolve_field_names(self.config.field_names, header_line, self.tokenizer)
        specs = resolve_field_specs(
            names, self.config.field_indices, names_are_explicit=explicit
        )
        bindings = build_bindings(self.schema, specs, self.registry)
        # Only publish once everything validated
        self._field_names = names
        self._bindings = bindings

    def _require_bindings(self) -> tuple[PropertyBinding, ...]:
        if self._bindings is None:
            raise ConfigurationError(
                "No field names configured and no header line has been read; "
                "call read_header() first or configure field_names"
            )
        return self._bindings

    # -- Parsing --------------------------------------------------------------

    def parse(self, line: str) -> list[RawField]:
        """Split *line* into named raw fields.

        Raises:
            ConfigurationError: If field names are not resolved yet.
            QuotingError: If qualifier usage is inconsistent.
            ArityError: If the token count does not fit the field names
                (or a subset index lies beyond the last token).
        """
        bindings = self._require_bindings()
        tokens = self.tokenizer.tokenize(line)

        if self.config.field_indices is None:
            expected = len(self._field_names)
            if len(tokens) != expected:
                raise ArityError(
                    f"Expected {expected} fields but found {len(tokens)}",
                    line,
                    expected=expected,
                    actual=len(tokens),
                )
            return [
                RawField(index=t.index, raw_content=t.raw_content, name=name)
                for t, name in zip(tokens, self._field_names)
            ]

        needed = max(b.index for b in bindings) + 1
        if len(tokens) < needed:
            raise ArityError(
                f"Field subset references index {needed - 1} but the line has "
                f"only {len(tokens)} fields",
                line,
                expected=needed,
                actual=len(tokens),
            )
        return [
            RawField(index=b.index, raw_content=tokens[b.index].raw_content, name=b.name)
            for b in bindings
        ]

    # -- Mapping --------------------------------------------------------------

    def map(self, fields: Sequence[RawField]) -> Any:
        """Convert *fields* and build a target object.

        Raises:
            ConfigurationError: If field names are not resolved yet.
            RecordMappingError: If a field is missing or cannot be
                converted, or the target type rejects the values.
        """
        bindings = self._require_bindings()
        by_index = {f.index: f for f in fields}
        values: dict[str, Any] = {}

        for binding in bindings:
            field = by_index.get(binding.index)
            if field is None:
                raise RecordMappingError(
                    f"Field {binding.index} ('{binding.name}') is missing from the record",
                    field_index=binding.index,
                    field_name=binding.name,
                )
            try:
                values[binding.name] = binding.converter.convert(field.raw_content)
            except ConversionError as exc:
                raise RecordMappingError(
                    f"Cannot map field {binding.index} ('{binding.name}'): {exc}",
                    field_index=binding.index,
                    field_name=binding.name,
                    raw_content=field.raw_content,
                ) from exc

        try:
            return self.schema.instantiate(values)
        except (ValueError, TypeError) as exc:
            raise RecordMappingError(
                f"Cannot build {self.target_type.__name__}: {exc}"
            ) from exc

    def map_line(self, line: str) -> Any:
        """``map(parse(line))``; raises on any failure."""
        return self.map(self.parse(line))

    def parse_and_map(self, line: str, record_number: int | None = None) -> MappingResult:
        """Parse and map *line*, reporting per-line failures as a result.

        Parsing and mapping errors are returned in ``MappingResult.error``;
        ``ConfigurationError`` still propagates since it concerns the
        mapper, not the line.
        """
        record = Record(number=record_number, payload=line) if record_number is not None else None
        try:
            value = self.map(self.parse(line))
        except (RecordParsingError, RecordMappingError) as exc:
            return MappingResult(record=record, error=exc)
        return MappingResult(record=record, value=value)


def build_mapper(
    target_type: type,
    config: MapperConfig | None = None,
    registry: ConverterRegistry | None = None,
    **settings: Any,
) -> RecordMapper:
    """Build an immutable ``RecordMapper``.

    Args:
        target_type: Dataclass or pydantic model to populate.
        config: Mapper settings. Defaults to ``MapperConfig()``.
        registry: Converter registry. Defaults to ``default_registry()``
            built with the config's date formats.
        **settings: ``MapperConfig`` fields overriding *config*
            (e.g. ``delimiter="|"``).

    Returns:
        A ``RecordMapper``; resolved already if field names were given.

    Raises:
        ConfigurationError: If the target type or field configuration is
            invalid.
        pydantic.ValidationError: If *settings* are not valid config values.

    Example::

        mapper = build_mapper(Person, delimiter="|", trim_whitespace=True)
        mapper.read_header("firstName|lastName|age")
        person = mapper.map_line("foo|bar|30")
    """
    if config is None:
        config = MapperConfig(**settings)
    elif settings:
        config = MapperConfig.model_validate({**config.model_dump(), **settings})
    return RecordMapper(config, target_type, registry=registry)
