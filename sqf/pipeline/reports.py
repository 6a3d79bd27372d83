"""Recode summaries and validation report persistence."""

from __future__ import annotations

import statistics
from collections import Counter
from pathlib import Path
from typing import Sequence

from sqf.common.fs import read_json, write_json
from sqf.common.models import StandardizedRecord, ValidationReport

MISSING_LABEL = "NA"


def _pct(part: int, whole: int) -> float:
    return 0.0 if whole == 0 else round((part / whole) * 100, 1)


def summarise_recoding(records: Sequence[StandardizedRecord]) -> dict:
    total = len(records)
    year_counts = Counter(record.year for record in records)
    race_counts = Counter(record.race.value if record.race else MISSING_LABEL for record in records)
    ages = [record.age for record in records if record.age is not None]

    return {
        "row_count": total,
        "rows_per_year": {str(year): count for year, count in sorted(year_counts.items())},
        "race": {
            label: {"count": count, "percent": _pct(count, total)}
            for label, count in sorted(race_counts.items())
        },
        "age": {
            "mean": round(statistics.mean(ages), 1) if ages else None,
            "median": statistics.median(ages) if ages else None,
            "missing_percent": _pct(total - len(ages), total),
        },
        "police_force_percent": _pct(sum(1 for record in records if record.police_force), total),
    }


def write_recode_summary(path: Path, summary: dict, *, run_id: str) -> Path:
    write_json(path, {"run_id": run_id, **summary})
    return path


def write_validation_report(path: Path, report: ValidationReport) -> Path:
    write_json(path, report.to_dict())
    return path


def read_validation_report(path: Path) -> ValidationReport:
    return ValidationReport.from_dict(read_json(path))


def format_validation_summary(report: ValidationReport) -> list[str]:
    lines = [
        "=== Data Validation Report ===",
        f"Rows: {report.row_count:,}",
        f"Columns: {report.column_count}",
        "Rows per year:",
    ]
    lines.extend(f"  {year}: {count:,}" for year, count in report.year_counts.items())

    if report.passed:
        lines.append("All validation checks passed!")
        return lines

    lines.append(f"Found {report.issue_count} issue(s):")
    for name, issue in report.issues.items():
        detail = ", ".join(str(item) for item in issue) if isinstance(issue, (list, tuple)) else str(issue)
        lines.append(f"  - {name}: {detail}")
    return lines
