"""
Configuration models and YAML I/O for flatrec.

This module defines the Pydantic models that map 1:1 to a job YAML file,
plus helpers for loading and saving it.

Key models:
- MapperConfig: Delimiter, qualifier, whitespace policy, field names and
  the optional field-index subset. Frozen: a mapper's configuration is
  fixed once it is built.
- SourceConfig: Input file, encoding, and whether line 1 is a header.
- FilterConfig: One record predicate (grep, record number, ...).
- OutputConfig: Where and how to export the mapped records.
- JobConfig: Top-level config (target type + all of the above).

Key functions:
- load_config(path) -> JobConfig: Load and validate from YAML.
- save_config(config, path): Serialize to YAML.
- resolve_target(target) -> type: Import the ``module:ClassName`` target.

Example job file::

    target: myapp.models:Person
    source:
      input_path: people.csv
      header: true
    mapper:
      delimiter: ","
      trim_whitespace: true
    filters:
      - kind: grep
        pattern: "#"
        negate: true
    output:
      output_path: out/people.parquet
"""

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from flatrec.converters.temporal import DEFAULT_DATE_FORMAT
from flatrec.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FilterKind = Literal[
    "grep",
    "record_number",
    "record_number_greater_than",
    "record_number_lower_than",
    "record_number_between",
    "empty",
    "starts_with",
    "ends_with",
]


class MapperConfig(BaseModel):
    """Settings of a delimited record mapper."""

    model_config = ConfigDict(frozen=True)

    delimiter: str = Field(",", min_length=1, description="Field delimiter (1+ chars)")
    qualifier: str | None = Field(
        None,
        min_length=1,
        max_length=1,
        description="Optional quote character; when set, fields are all-or-nothing qualified",
    )
    trim_whitespace: bool = Field(
        False, description="Trim whitespace around each field before unqualifying"
    )
    field_names: tuple[str, ...] | None = Field(
        None, description="Explicit field names; if omitted, read from the header line"
    )
    field_indices: tuple[int, ...] | None = Field(
        None, description="Subset of token positions to map; others are ignored"
    )
    date_format: str = Field(DEFAULT_DATE_FORMAT, description="strptime format for dates")
    datetime_format: str | None = Field(
        None, description="strptime format for datetimes; ISO-8601 if omitted"
    )

    @model_validator(mode="after")
    def _check_qualifier_not_in_delimiter(self) -> MapperConfig:
        if self.qualifier is not None and self.qualifier in self.delimiter:
            raise ValueError(
                f"Qualifier {self.qualifier!r} must not be part of the delimiter "
                f"{self.delimiter!r}"
            )
        return self


class SourceConfig(BaseModel):
    """Input file information."""

    input_path: str = Field(..., description="Path to the delimited text file")
    encoding: str = Field("utf-8", description="Text encoding of the input file")
    header: bool = Field(False, description="If True, line 1 holds the field names")
    skip_blank_lines: bool = Field(False, description="If True, blank lines are not records")


class FilterConfig(BaseModel):
    """One record predicate.

    Which parameters are required depends on ``kind``:
    ``grep`` needs ``pattern``; ``starts_with``/``ends_with`` need
    ``patterns``; ``record_number`` needs ``numbers``;
    ``record_number_greater_than`` needs ``lower``;
    ``record_number_lower_than`` needs ``upper``;
    ``record_number_between`` needs both; ``empty`` needs nothing.
    """

    kind: FilterKind
    pattern: str | None = None
    patterns: list[str] | None = None
    numbers: list[int] | None = None
    lower: int | None = None
    upper: int | None = None
    negate: bool = False

    @model_validator(mode="after")
    def _check_parameters(self) -> FilterConfig:
        required: dict[str, tuple[str, ...]] = {
            "grep": ("pattern",),
            "starts_with": ("patterns",),
            "ends_with": ("patterns",),
            "record_number": ("numbers",),
            "record_number_greater_than": ("lower",),
            "record_number_lower_than": ("upper",),
            "record_number_between": ("lower", "upper"),
            "empty": (),
        }
        missing = [name for name in required[self.kind] if getattr(self, name) in (None, "", [])]
        if missing:
            raise ValueError(f"Filter '{self.kind}' requires: {missing}")
        return self


class OutputConfig(BaseModel):
    """Output settings."""

    output_path: str | None = Field(
        None, description="File to write mapped records to; nothing is written if omitted"
    )
    output_format: Literal["csv", "parquet"] = Field("parquet", description="Output format")


class JobConfig(BaseModel):
    """Top-level configuration of a mapping job.

    Maps 1:1 to the job YAML file.
    """

    target: str = Field(..., description="Target type as 'package.module:ClassName'")
    source: SourceConfig
    mapper: MapperConfig = Field(default_factory=MapperConfig)
    filters: list[FilterConfig] = Field(default_factory=list)
    output: OutputConfig = Field(default_factory=OutputConfig)
    strict: bool = Field(
        False, description="If True, abort the job on the first record that fails"
    )

    @model_validator(mode="after")
    def _check_names_source(self) -> JobConfig:
        """Field names must come from somewhere."""
        if not self.mapper.field_names and not self.source.header:
            raise ValueError(
                "No field names: set mapper.field_names or source.header: true"
            )
        return self


def resolve_target(target: str) -> type:
    """Import a target type given as ``"package.module:ClassName"``.

    Raises:
        ConfigurationError: If *target* is malformed or cannot be imported.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigurationError(
            f"Target must look like 'package.module:ClassName', got {target!r}"
        )
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import module {module_name!r}: {exc}") from exc
    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ConfigurationError(f"{module_name!r} has no attribute {attr!r}") from exc
    if not isinstance(obj, type):
        raise ConfigurationError(f"Target {target!r} is not a class")
    return obj


def load_config(path: str | Path) -> JobConfig:
    """Load and validate a job YAML file into a JobConfig model.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigurationError: If the file is empty.
        pydantic.ValidationError: If the YAML content fails schema validation.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        raise ConfigurationError(f"Config file is empty: {path}")
    logger.info("Loaded config from %s", path)
    return JobConfig.model_validate(raw)


def save_config(config: JobConfig, path: str | Path) -> None:
    """Serialize a JobConfig to YAML.

    Writes a human-readable YAML file with a header comment.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(mode="json")
    with open(path, "w", encoding="utf-8") as f:
        f.write("# flatrec job configuration\n\n")
        yaml.dump(
            data,
            f,
            allow_unicode=True,
            default_flow_style=False,
            sort_keys=False,
        )
    logger.info("Saved config to %s", path)
