"""Raw per-year CSV ingestion."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from sqf.common.constants import MISSING_TOKENS, SUPPORTED_YEARS
from sqf.common.errors import ConfigError
from sqf.common.fs import read_csv_rows
from sqf.common.models import RawRecord


def raw_path(data_dir: Path, year: int) -> Path:
    return data_dir / "raw" / f"{year}.csv"


def _text_or_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if value in MISSING_TOKENS:
        return None
    return value


def load_year(year: int, data_dir: Path) -> list[RawRecord]:
    """Load one year of raw records with every value kept as text.

    Values are never type-inferred; the recoders decide how to read them.
    Surrounding whitespace is trimmed, and bytes that are not valid UTF-8
    become U+FFFD in the affected cell only.
    """
    if year not in SUPPORTED_YEARS:
        raise ConfigError(f"Year must be between {SUPPORTED_YEARS[0]} and {SUPPORTED_YEARS[-1]}, got {year}")

    header, rows = read_csv_rows(raw_path(data_dir, year), errors="replace")
    return [
        RawRecord(
            source_year=year,
            fields={name: _text_or_none(row.get(name)) for name in header},
        )
        for row in rows
    ]


def load_years(years: Iterable[int], data_dir: Path) -> dict[int, list[RawRecord]]:
    return {year: load_year(year, data_dir) for year in sorted(set(years))}
