"""
Record source for flatrec.

Yields numbered ``Record`` objects from a text file or any iterable of
lines. Numbering is 1-based and counts every physical line, so record
numbers stay aligned with line numbers in the file even when blank lines
are skipped.

Line terminators (``\\n``, ``\\r\\n``) are stripped; no other whitespace
is touched (that is the tokenizer's job).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from flatrec.records import Record

logger = logging.getLogger(__name__)


def iter_records(lines: Iterable[str], skip_blank_lines: bool = False) -> Iterator[Record]:
    """Number an iterable of lines as records."""
    for number, line in enumerate(lines, start=1):
        payload = line.rstrip("\r\n")
        if skip_blank_lines and not payload.strip():
            logger.debug("Skipping blank line %d", number)
            continue
        yield Record(number=number, payload=payload)


def read_records(
    path: str | Path,
    encoding: str = "utf-8",
    skip_blank_lines: bool = False,
) -> Iterator[Record]:
    """Yield the lines of a text file as numbered records.

    A UTF-8 byte-order mark is dropped when *encoding* is ``utf-8``.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")
    if encoding.lower().replace("_", "-") == "utf-8":
        encoding = "utf-8-sig"
    logger.info("Reading records from %s", path)
    with open(path, "r", encoding=encoding, newline="") as f:
        yield from iter_records(f, skip_blank_lines=skip_blank_lines)
