"""Filesystem helpers."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, Mapping

from sqf.common.errors import StageError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def read_json(path: Path):
    if not path.exists():
        raise StageError(f"Missing JSON input: {path}")
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def read_csv_rows(path: Path, *, errors: str = "strict") -> tuple[list[str], list[dict[str, str]]]:
    if not path.exists():
        raise StageError(f"Missing CSV input: {path}")
    try:
        with path.open("r", encoding="utf-8", errors=errors, newline="") as f:
            reader = csv.DictReader(f)
            return list(reader.fieldnames or []), list(reader)
    except UnicodeDecodeError as exc:
        raise StageError(f"CSV input is not valid UTF-8: {path}") from exc


def write_csv(path: Path, headers: list[str], rows: Iterable[Mapping[str, object]]) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
