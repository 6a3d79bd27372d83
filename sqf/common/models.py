"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class Race(Enum):
    WHITE = "White"
    BLACK = "Black"
    HISPANIC = "Hispanic"
    ASIAN = "Asian"
    OTHER = "Other"


class DateFormat(Enum):
    YMD = "ymd"
    MDY = "mdy"


@dataclass(frozen=True)
class RawRecord:
    source_year: int
    fields: Mapping[str, str | None]

    def get(self, name: str) -> str | None:
        return self.fields.get(name)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(self.fields)


@dataclass(frozen=True)
class StandardizedRecord:
    id: str
    date: date | None
    time: datetime | None
    year: int
    race: Race | None
    female: bool | None
    age: int | None
    police_force: bool
    precinct: int | None
    xcoord: float | None
    ycoord: float | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ValidationReport:
    passed: bool
    issues: Mapping[str, Any] = field(default_factory=dict)
    row_count: int = 0
    column_count: int = 0
    year_counts: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only views over private copies; list descriptions become tuples.
        issues = {name: tuple(issue) if isinstance(issue, list) else issue for name, issue in self.issues.items()}
        object.__setattr__(self, "issues", MappingProxyType(issues))
        object.__setattr__(self, "year_counts", MappingProxyType(dict(self.year_counts)))

    @property
    def issue_count(self) -> int:
        return len(self.issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "issue_count": self.issue_count,
            "issues": {name: list(issue) if isinstance(issue, tuple) else issue for name, issue in self.issues.items()},
            "row_count": self.row_count,
            "column_count": self.column_count,
            "year_counts": {str(year): count for year, count in self.year_counts.items()},
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ValidationReport":
        return cls(
            passed=bool(payload["passed"]),
            issues=dict(payload.get("issues", {})),
            row_count=int(payload.get("row_count", 0)),
            column_count=int(payload.get("column_count", 0)),
            year_counts=dict(sorted((int(year), int(count)) for year, count in payload.get("year_counts", {}).items())),
        )


@dataclass(frozen=True)
class ValidationRules:
    year_range: tuple[int, int] = (2006, 2012)
    age_range: tuple[int, int] = (0, 100)
    max_age_missing_pct: float = 20.0
    max_race_missing_pct: float = 5.0
    max_coord_missing_pct: float = 50.0
