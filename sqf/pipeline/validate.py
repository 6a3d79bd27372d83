"""Quality checks over the standardised stop table."""

from __future__ import annotations

import math
from collections import Counter
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Sequence

from sqf.common.coerce import safe_float
from sqf.common.constants import STANDARDIZED_COLUMNS
from sqf.common.deterministic import ordered_union
from sqf.common.models import StandardizedRecord, ValidationReport, ValidationRules
from sqf.common.race import RACE_LEVELS

Row = Mapping[str, Any]
Check = Callable[[Sequence[Row], list[str], ValidationRules], dict[str, Any]]


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _missing_pct(rows: Sequence[Row], column: str) -> float:
    if not rows:
        return 0.0
    missing = sum(1 for row in rows if _is_missing(row.get(column)))
    return round((missing / len(rows)) * 100, 1)


def _present(rows: Sequence[Row], column: str) -> list[Any]:
    return [row.get(column) for row in rows if not _is_missing(row.get(column))]


def _count_outside(values: Iterable[Any], bounds: tuple[int, int]) -> int:
    minimum, maximum = bounds
    count = 0
    for value in values:
        number = safe_float(value)
        if number is not None and (number < minimum or number > maximum):
            count += 1
    return count


def check_columns(rows, columns, rules) -> dict[str, Any]:
    missing = [name for name in STANDARDIZED_COLUMNS if name not in columns]
    return {"missing_columns": missing} if missing else {}


def check_years(rows, columns, rules) -> dict[str, Any]:
    if "year" not in columns:
        return {}
    invalid = _count_outside(_present(rows, "year"), rules.year_range)
    if invalid > 0:
        low, high = rules.year_range
        return {"invalid_years": f"{invalid} rows with year outside {low}-{high}"}
    return {}


def check_ages(rows, columns, rules) -> dict[str, Any]:
    if "age" not in columns:
        return {}
    issues: dict[str, Any] = {}
    invalid = _count_outside(_present(rows, "age"), rules.age_range)
    if invalid > 0:
        low, high = rules.age_range
        issues["invalid_ages"] = f"{invalid} rows with age outside {low}-{high}"
    pct = _missing_pct(rows, "age")
    if pct > rules.max_age_missing_pct:
        issues["high_age_missing"] = f"{pct:.1f}% of age values are NA"
    return issues


def check_race(rows, columns, rules) -> dict[str, Any]:
    if "race" not in columns:
        return {}
    issues: dict[str, Any] = {}
    values = _present(rows, "race")
    non_categorical = [value for value in values if not isinstance(value, Enum)]
    if non_categorical:
        kind = type(non_categorical[0]).__name__
        issues["race_not_factor"] = f"race column should be categorical, found {kind}"
    else:
        # Declared levels, not just observed ones, as with any categorical type.
        levels = ordered_union([member.value for member in type(value)] for value in values)
        unexpected = [level for level in levels if level not in RACE_LEVELS]
        if unexpected:
            issues["unexpected_race_levels"] = unexpected
    pct = _missing_pct(rows, "race")
    if pct > rules.max_race_missing_pct:
        issues["high_race_missing"] = f"{pct:.1f}% of race values are NA"
    return issues


def check_female(rows, columns, rules) -> dict[str, Any]:
    if "female" not in columns:
        return {}
    for value in _present(rows, "female"):
        if not isinstance(value, bool):
            return {"female_not_logical": f"female column is {type(value).__name__}, expected logical"}
    return {}


def check_coordinates(rows, columns, rules) -> dict[str, Any]:
    issues: dict[str, Any] = {}
    for column in ("xcoord", "ycoord"):
        if column not in columns:
            continue
        pct = _missing_pct(rows, column)
        if pct > rules.max_coord_missing_pct:
            issues[f"high_{column}_missing"] = f"{pct:.1f}% of {column} values are NA"
    return issues


def check_ids(rows, columns, rules) -> dict[str, Any]:
    if "id" not in columns:
        return {}
    duplicates = len(rows) - len({row.get("id") for row in rows})
    if duplicates > 0:
        return {"duplicate_ids": f"{duplicates} duplicate IDs found"}
    return {}


CHECKS: tuple[Check, ...] = (
    check_columns,
    check_years,
    check_ages,
    check_race,
    check_female,
    check_coordinates,
    check_ids,
)


def _as_rows(table: Sequence[StandardizedRecord | Row]) -> list[Row]:
    return [row.to_dict() if isinstance(row, StandardizedRecord) else row for row in table]


def _table_columns(table: Sequence[StandardizedRecord | Row], rows: list[Row]) -> list[str]:
    if all(isinstance(row, StandardizedRecord) for row in table):
        return list(STANDARDIZED_COLUMNS)
    return ordered_union(rows)


def _year_counts(rows: Sequence[Row]) -> dict[int, int]:
    counts: Counter[int] = Counter()
    for value in _present(rows, "year"):
        number = safe_float(value)
        if number is not None:
            counts[int(number)] += 1
    return dict(sorted(counts.items()))


def validate_table(
    table: Sequence[StandardizedRecord | Row],
    columns: Sequence[str] | None = None,
    rules: ValidationRules = ValidationRules(),
) -> ValidationReport:
    """Run every check against the table and collect the issues they raise.

    ``table`` may hold recoded records or plain mappings read back from
    storage; ``columns`` defaults to the record schema or the union of
    mapping keys. Checks never raise for data problems and none of them
    is skipped because another one failed.
    """
    if table is None:
        raise TypeError("validate_table requires a table, got None")

    rows = _as_rows(table)
    table_columns = list(columns) if columns is not None else _table_columns(table, rows)

    issues: dict[str, Any] = {}
    for check in CHECKS:
        issues.update(check(rows, table_columns, rules))

    return ValidationReport(
        passed=not issues,
        issues=issues,
        row_count=len(rows),
        column_count=len(table_columns),
        year_counts=_year_counts(rows),
    )
