"""Standardised table CSV export and typed read-back."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from sqf.common.coerce import safe_float, safe_int
from sqf.common.constants import STANDARDIZED_COLUMNS
from sqf.common.fs import read_csv_rows, write_csv
from sqf.common.models import Race, StandardizedRecord

TIME_FORMAT = "%Y-%m-%dT%H:%M"
BOOLEAN_TEXT = {"true": True, "false": False}


def _serialize_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.strftime(TIME_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Race):
        return value.value
    return value


def _serialize_row(record: StandardizedRecord) -> dict:
    row = record.to_dict()
    return {key: _serialize_value(row[key]) for key in STANDARDIZED_COLUMNS}


def write_standardized_csv(path: Path, records: Iterable[StandardizedRecord]) -> Path:
    write_csv(path, list(STANDARDIZED_COLUMNS), (_serialize_row(record) for record in records))
    return path


def _decode_bool(text: str) -> bool:
    return BOOLEAN_TEXT[text]


def _decode_int(text: str) -> int:
    value = safe_int(text)
    if value is None or str(value) != text.strip():
        raise ValueError(text)
    return value


def _decode_float(text: str) -> float:
    value = safe_float(text)
    if value is None:
        raise ValueError(text)
    return value


DECODERS: dict[str, Callable[[str], Any]] = {
    "date": date.fromisoformat,
    "time": lambda text: datetime.strptime(text, TIME_FORMAT),
    "year": _decode_int,
    "race": Race,
    "female": _decode_bool,
    "age": _decode_int,
    "police_force": _decode_bool,
    "precinct": _decode_int,
    "xcoord": _decode_float,
    "ycoord": _decode_float,
}


def _decode_cell(column: str, text: str | None) -> Any:
    if text is None or text == "":
        return None
    decoder = DECODERS.get(column)
    if decoder is None:
        return text
    try:
        return decoder(text)
    except (KeyError, ValueError):
        # Left as text so validation reports the wrong type.
        return text


def read_standardized_csv(path: Path) -> tuple[list[str], list[dict[str, Any]]]:
    header, raw_rows = read_csv_rows(path)
    rows = [{column: _decode_cell(column, row.get(column)) for column in header} for row in raw_rows]
    return header, rows
