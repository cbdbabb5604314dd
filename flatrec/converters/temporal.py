"""
Date and time converters.

- DateConverter: ``datetime.date`` using a strptime format
  (default ``%Y-%m-%d``, e.g. ``1990-12-12``).
- DateTimeConverter: ``datetime.datetime``; ISO-8601 by default, or a
  strptime format when one is given.
- TimeConverter: ``datetime.time``; ISO-8601 by default.
- TimestampConverter: ``pandas.Timestamp`` via ``pd.to_datetime`` with
  ``errors="raise"``, so unparsable text fails instead of becoming NaT.
  The relative keywords pandas understands (``now``, ``today``) are
  rejected: a field value must describe a fixed point in time.
"""

from __future__ import annotations

import datetime as dt

import pandas as pd

from flatrec.converters.base import TypeConverter

DEFAULT_DATE_FORMAT = "%Y-%m-%d"

_RELATIVE_KEYWORDS = frozenset({"now", "today"})


class DateConverter(TypeConverter):
    target_type = dt.date

    def __init__(self, date_format: str = DEFAULT_DATE_FORMAT) -> None:
        self.date_format = date_format

    def _convert(self, value: str) -> dt.date:
        try:
            return dt.datetime.strptime(value, self.date_format).date()
        except ValueError as exc:
            raise self._malformed(value, f"expected format {self.date_format!r}") from exc

    def __repr__(self) -> str:
        return f"DateConverter({self.date_format!r})"


class DateTimeConverter(TypeConverter):
    target_type = dt.datetime

    def __init__(self, datetime_format: str | None = None) -> None:
        self.datetime_format = datetime_format

    def _convert(self, value: str) -> dt.datetime:
        try:
            if self.datetime_format is None:
                return dt.datetime.fromisoformat(value)
            return dt.datetime.strptime(value, self.datetime_format)
        except ValueError as exc:
            raise self._malformed(value) from exc

    def __repr__(self) -> str:
        return f"DateTimeConverter({self.datetime_format!r})"


class TimeConverter(TypeConverter):
    target_type = dt.time

    def _convert(self, value: str) -> dt.time:
        try:
            return dt.time.fromisoformat(value)
        except ValueError as exc:
            raise self._malformed(value) from exc


class TimestampConverter(TypeConverter):
    target_type = pd.Timestamp

    def __init__(self, timestamp_format: str | None = None) -> None:
        self.timestamp_format = timestamp_format

    def _convert(self, value: str) -> pd.Timestamp:
        if value.strip().lower() in _RELATIVE_KEYWORDS:
            raise self._malformed(value, "relative keywords are not dates")
        try:
            return pd.to_datetime(value, format=self.timestamp_format, errors="raise")
        except (ValueError, OverflowError) as exc:
            raise self._malformed(value) from exc
