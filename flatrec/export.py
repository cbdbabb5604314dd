"""
Exporter for flatrec.

Turns mapped target objects into a ``pandas.DataFrame`` and writes it to
disk as CSV or Parquet.

- Dataclass objects are flattened with ``dataclasses.asdict``.
- Pydantic models are flattened with ``model_dump()``.

CSV files are written with ``utf-8-sig`` encoding (BOM) so that non-ASCII
text displays correctly when opened in Excel. Parquet is written with
the pyarrow engine and keeps column dtypes.
"""

from __future__ import annotations

import dataclasses
import enum
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Literal

import pandas as pd
from pydantic import BaseModel

from flatrec.exceptions import ExportError

logger = logging.getLogger(__name__)

_SUPPORTED_FORMATS = {"csv", "parquet"}


def _as_row(obj: Any) -> dict[str, Any]:
    if isinstance(obj, BaseModel):
        row = obj.model_dump()
    elif dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        row = dataclasses.asdict(obj)
    else:
        raise ExportError(f"Cannot export object of type {type(obj).__name__}")
    # Enum members are stored by value
    return {k: v.value if isinstance(v, enum.Enum) else v for k, v in row.items()}


def to_frame(objects: Sequence[Any], columns: Sequence[str] | None = None) -> pd.DataFrame:
    """Build a DataFrame with one row per mapped object.

    Args:
        objects: Dataclass instances or pydantic models.
        columns: Column order for an empty result (otherwise taken from
            the objects).
    """
    if not objects:
        return pd.DataFrame(columns=list(columns or []))
    return pd.DataFrame([_as_row(obj) for obj in objects])


def export_frame(
    df: pd.DataFrame,
    path: str | Path,
    output_format: Literal["csv", "parquet"] = "parquet",
) -> str:
    """Write *df* to *path*, creating parent directories as needed.

    Returns:
        The written path as a string.

    Raises:
        ExportError: If *output_format* is unsupported, or the write fails.
    """
    if output_format not in _SUPPORTED_FORMATS:
        raise ExportError(
            f"Unsupported output format: '{output_format}'. "
            f"Supported formats: {sorted(_SUPPORTED_FORMATS)}"
        )

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if output_format == "csv":
            df.to_csv(path, index=False, encoding="utf-8-sig")
        else:  # parquet
            df.to_parquet(path, index=False, engine="pyarrow")
    except Exception as exc:
        raise ExportError(
            f"Failed to write {path.name} as {output_format}: {exc}"
        ) from exc

    logger.info(
        "Exported %d rows x %d cols -> %s", len(df), len(df.columns), path
    )
    return str(path)
