"""
Job runner for flatrec.

Feeds numbered records through the stages of a mapping job:

1. **Header**: when the source has a header, record 1 resolves the
   mapper's field names and is not mapped.
2. **Filter**: each predicate is tested on the raw record; a record for
   which any predicate returns ``True`` is filtered out.
3. **Map**: ``mapper.parse_and_map()``; successes are collected, failures
   are kept as ``MappingResult``s (or raised in strict mode).
4. **Export** (``run_job`` only): mapped objects are written as CSV or
   Parquet when the config names an output path.

Returns a ``JobReport`` with the mapped objects, the failures and the
record counts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from flatrec.config import JobConfig, resolve_target
from flatrec.converters.registry import ConverterRegistry
from flatrec.export import export_frame, to_frame
from flatrec.filters import RecordPredicate, build_predicate
from flatrec.mapper import RecordMapper, build_mapper
from flatrec.reader import read_records
from flatrec.records import MappingResult, Record

logger = logging.getLogger(__name__)


@dataclass
class JobReport:
    """Outcome of a mapping job.

    Attributes:
        objects: Successfully mapped target objects, in record order.
        errors: Failed ``MappingResult``s (each carries its record and error).
        total_records: Records read from the source.
        header_records: Records consumed as the header (0 or 1).
        filtered_records: Records dropped by a predicate.
        output_path: Path of the exported file, if any.
    """

    objects: list[Any] = field(default_factory=list)
    errors: list[MappingResult] = field(default_factory=list)
    total_records: int = 0
    header_records: int = 0
    filtered_records: int = 0
    output_path: str | None = None

    @property
    def mapped_records(self) -> int:
        return len(self.objects)

    @property
    def error_records(self) -> int:
        return len(self.errors)

    def to_frame(self, columns: Sequence[str] | None = None) -> pd.DataFrame:
        """Mapped objects as a DataFrame, one row per object."""
        return to_frame(self.objects, columns=columns)


def run_records(
    records: Iterable[Record],
    mapper: RecordMapper,
    predicates: Sequence[RecordPredicate] = (),
    header: bool = False,
    strict: bool = False,
) -> JobReport:
    """Run header resolution, filtering and mapping over *records*.

    Args:
        records: Numbered records, e.g. from ``read_records()``.
        mapper: The mapper to use; resolved by record 1 if *header*.
        predicates: Records for which any predicate is ``True`` are dropped.
        header: If ``True``, the first record is the header line.
        strict: If ``True``, the first mapping failure is raised.

    Returns:
        ``JobReport`` with objects, failures and counts.

    Raises:
        ConfigurationError: If the mapper cannot be resolved.
        RecordParsingError, RecordMappingError: In strict mode only.
    """
    report = JobReport()
    first = True

    for record in records:
        report.total_records += 1

        if header and first:
            first = False
            mapper.read_header(record.payload)
            report.header_records += 1
            continue
        first = False

        if any(p.test(record) for p in predicates):
            logger.debug("Record %d filtered", record.number)
            report.filtered_records += 1
            continue

        result = mapper.parse_and_map(record.payload, record_number=record.number)
        if result.ok:
            report.objects.append(result.value)
            continue

        if strict:
            raise result.error
        logger.warning("Record %d failed: %s", record.number, result.error)
        report.errors.append(result)

    logger.info(
        "Records: %d total, %d header, %d filtered, %d mapped, %d errors",
        report.total_records,
        report.header_records,
        report.filtered_records,
        report.mapped_records,
        report.error_records,
    )
    return report


def run_job(config: JobConfig, registry: ConverterRegistry | None = None) -> JobReport:
    """Run a complete job described by a ``JobConfig``.

    Steps:
      1. Resolve the target type and build the mapper and predicates.
      2. Read the source file and run ``run_records()``.
      3. Export the mapped objects if ``output.output_path`` is set.

    Args:
        config: The validated JobConfig.
        registry: Converter registry; defaults to the built-ins.

    Returns:
        ``JobReport`` (with ``output_path`` set when exported).
    """
    target_type = resolve_target(config.target)
    logger.info(
        "Job started: %s -> %s", config.source.input_path, target_type.__name__
    )

    mapper = build_mapper(target_type, config=config.mapper, registry=registry)
    predicates = [build_predicate(f) for f in config.filters]

    records = read_records(
        config.source.input_path,
        encoding=config.source.encoding,
        skip_blank_lines=config.source.skip_blank_lines,
    )
    report = run_records(
        records,
        mapper,
        predicates=predicates,
        header=config.source.header,
        strict=config.strict,
    )

    if config.output.output_path:
        columns = [s.name for s in mapper.field_specs or ()]
        report.output_path = export_frame(
            report.to_frame(columns=columns),
            config.output.output_path,
            output_format=config.output.output_format,
        )

    logger.info("Job complete: %d objects mapped", report.mapped_records)
    return report
