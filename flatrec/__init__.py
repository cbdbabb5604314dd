"""
flatrec: map delimited text records to typed Python objects.

Public API surface:

- ``build_mapper(target_type, ...)`` -- build a ``RecordMapper`` that
  parses delimited lines (delimiter, qualifier, whitespace policy, field
  subset) and binds them to a dataclass or pydantic model through the
  converter registry.

- ``run(config_path)`` -- load a job YAML file and run it: read the
  source file, resolve the header, apply record filters, map every line,
  and optionally export the result. Returns a ``JobReport``.

- ``run_job(config)`` / ``run_records(records, mapper, ...)`` -- the same
  pipeline for an in-memory ``JobConfig`` or an iterable of records.

Example::

    @dataclass
    class Person:
        firstName: str
        lastName: str
        age: int
        birthDate: datetime.date
        married: bool

    mapper = flatrec.build_mapper(Person)
    mapper.read_header("firstName,lastName,age,birthDate,married")
    person = mapper.map_line("foo,bar,30,1990-12-12,true")
"""

from __future__ import annotations

import logging
from pathlib import Path

from flatrec.config import JobConfig, MapperConfig, load_config, save_config
from flatrec.converters import ConverterRegistry, TypeConverter, default_registry
from flatrec.exceptions import (
    ArityError,
    ConfigurationError,
    ConversionError,
    FlatRecError,
    QuotingError,
    RecordMappingError,
    RecordParsingError,
)
from flatrec.filters import GrepPredicate, RecordNumberEqualsToPredicate, RecordPredicate
from flatrec.job import JobReport, run_job, run_records
from flatrec.mapper import RecordMapper, build_mapper
from flatrec.reader import read_records
from flatrec.records import FieldSpec, MappingResult, RawField, Record
from flatrec.tokenizer import DelimitedTokenizer, tokenize

__all__ = [
    "run",
    "build_mapper",
    "run_job",
    "run_records",
    "load_config",
    "save_config",
    "read_records",
    "tokenize",
    "JobConfig",
    "JobReport",
    "MapperConfig",
    "RecordMapper",
    "DelimitedTokenizer",
    "ConverterRegistry",
    "TypeConverter",
    "default_registry",
    "RecordPredicate",
    "GrepPredicate",
    "RecordNumberEqualsToPredicate",
    "Record",
    "RawField",
    "FieldSpec",
    "MappingResult",
    "FlatRecError",
    "ConfigurationError",
    "RecordParsingError",
    "QuotingError",
    "ArityError",
    "ConversionError",
    "RecordMappingError",
]

logger = logging.getLogger(__name__)


def run(config_path: str | Path) -> JobReport:
    """Load a job YAML file and run it.

    Args:
        config_path: Path to the job configuration.

    Returns:
        The ``JobReport`` of the run.

    Raises:
        FileNotFoundError: If the config or input file does not exist.
        pydantic.ValidationError: If the config fails validation.
        ConfigurationError: If the target type or mapping is invalid.
    """
    logger.info("run() -- config_path=%s", config_path)
    config = load_config(config_path)
    return run_job(config)
