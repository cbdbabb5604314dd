"""
Target-type binding for flatrec.

A mapper fills instances of one *target type*: a dataclass or a pydantic
model. Its properties and their declared types are read once, when the
bindings are built, and validated eagerly:

- every mapped field name must be a property of the target type;
- every required property (no default) must be mapped, since unmapped
  properties are left to their defaults;
- every mapped property type must have a converter in the registry.

The result is a tuple of ``PropertyBinding`` objects (token position ->
property name -> converter) that the mapper walks for each line without
any further type inspection.
"""

from __future__ import annotations

import dataclasses
import typing
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from flatrec.converters.base import TypeConverter
from flatrec.converters.registry import ConverterRegistry
from flatrec.exceptions import ConfigurationError
from flatrec.records import FieldSpec


@dataclass(frozen=True)
class PropertyInfo:
    """A settable property of the target type."""
    name: str
    annotation: Any
    required: bool


@dataclass(frozen=True)
class PropertyBinding:
    """Binds one token position to one target property and its converter."""
    spec: FieldSpec
    annotation: Any
    converter: TypeConverter

    @property
    def index(self) -> int:
        return self.spec.index

    @property
    def name(self) -> str:
        return self.spec.name


class TargetSchema:
    """Properties of a dataclass or pydantic model, read once."""

    def __init__(self, target_type: type, properties: dict[str, PropertyInfo]) -> None:
        self.target_type = target_type
        self.properties = properties

    @classmethod
    def from_type(cls, target_type: type) -> TargetSchema:
        """Inspect *target_type*.

        Raises:
            ConfigurationError: If the type is neither a dataclass nor a
                pydantic model, or its annotations cannot be resolved.
        """
        if isinstance(target_type, type) and dataclasses.is_dataclass(target_type):
            try:
                hints = typing.get_type_hints(target_type)
            except NameError as exc:
                raise ConfigurationError(
                    f"Cannot resolve annotations of {target_type.__name__}: {exc}"
                ) from exc
            properties = {
                f.name: PropertyInfo(
                    name=f.name,
                    annotation=hints.get(f.name, f.type),
                    required=(
                        f.default is dataclasses.MISSING
                        and f.default_factory is dataclasses.MISSING
                    ),
                )
                for f in dataclasses.fields(target_type)
                if f.init
            }
        elif isinstance(target_type, type) and issubclass(target_type, BaseModel):
            properties = {
                name: PropertyInfo(
                    name=name, annotation=info.annotation, required=info.is_required()
                )
                for name, info in target_type.model_fields.items()
            }
        else:
            raise ConfigurationError(
                f"Target type must be a dataclass or a pydantic model, got {target_type!r}"
            )
        return cls(target_type, properties)

    def instantiate(self, values: dict[str, Any]) -> Any:
        """Create a target object from converted property values."""
        return self.target_type(**values)

    def __repr__(self) -> str:
        return f"TargetSchema({self.target_type.__name__}, {list(self.properties)})"


def build_bindings(
    schema: TargetSchema,
    specs: Sequence[FieldSpec],
    registry: ConverterRegistry,
) -> tuple[PropertyBinding, ...]:
    """Validate *specs* against *schema* and resolve a converter per field.

    Raises:
        ConfigurationError: On unknown properties, unmapped required
            properties, or property types without a converter.
    """
    type_name = schema.target_type.__name__

    unknown = [s.name for s in specs if s.name not in schema.properties]
    if unknown:
        raise ConfigurationError(
            f"Field(s) {unknown} have no matching property on {type_name}. "
            f"Properties: {list(schema.properties)}"
        )

    mapped = {s.name for s in specs}
    unmapped_required = [
        p.name for p in schema.properties.values() if p.required and p.name not in mapped
    ]
    if unmapped_required:
        raise ConfigurationError(
            f"Required propert(y/ies) {unmapped_required} of {type_name} are not "
            "mapped to any field; give them defaults or map them"
        )

    bindings = []
    for spec in specs:
        annotation = schema.properties[spec.name].annotation
        try:
            converter = registry.get(annotation)
        except ConfigurationError as exc:
            raise ConfigurationError(
                f"Property '{spec.name}' of {type_name}: {exc}"
            ) from exc
        bindings.append(PropertyBinding(spec=spec, annotation=annotation, converter=converter))
    return tuple(bindings)
