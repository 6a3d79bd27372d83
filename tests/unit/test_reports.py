from pathlib import Path

import pytest

from sqf.common.models import Race, StandardizedRecord, ValidationReport
from sqf.pipeline.reports import (
    format_validation_summary,
    read_validation_report,
    summarise_recoding,
    write_validation_report,
)


def _record(ordinal, year, race, age, police_force):
    return StandardizedRecord(
        id=f"{year}-{ordinal}",
        date=None,
        time=None,
        year=year,
        race=race,
        female=None,
        age=age,
        police_force=police_force,
        precinct=None,
        xcoord=None,
        ycoord=None,
    )


def test_summarise_recoding():
    records = [
        _record(1, 2006, Race.WHITE, 20, True),
        _record(2, 2006, Race.BLACK, 30, False),
        _record(1, 2007, None, None, False),
        _record(2, 2007, Race.WHITE, 41, False),
    ]

    summary = summarise_recoding(records)

    assert summary["row_count"] == 4
    assert summary["rows_per_year"] == {"2006": 2, "2007": 2}
    assert summary["race"]["White"] == {"count": 2, "percent": 50.0}
    assert summary["race"]["NA"] == {"count": 1, "percent": 25.0}
    assert summary["age"] == {"mean": 30.3, "median": 30, "missing_percent": 25.0}
    assert summary["police_force_percent"] == 25.0


def test_summarise_empty_table():
    summary = summarise_recoding([])

    assert summary["row_count"] == 0
    assert summary["age"]["mean"] is None
    assert summary["police_force_percent"] == 0.0


def test_validation_report_round_trip(tmp_path: Path):
    report = ValidationReport(
        passed=False,
        issues={"missing_columns": ["xcoord"], "duplicate_ids": "1 duplicate IDs found"},
        row_count=3,
        column_count=10,
        year_counts={2006: 2, 2007: 1},
    )

    path = write_validation_report(tmp_path / "out" / "reports" / "validation_report.json", report)

    assert read_validation_report(path) == report
    assert '"issue_count": 2' in path.read_text(encoding="utf-8")


def test_format_validation_summary_lists_issues():
    report = ValidationReport(
        passed=False,
        issues={"unexpected_race_levels": ["Unknown", "Mixed"], "invalid_years": "2 rows with year outside 2006-2012"},
        row_count=1200,
        column_count=11,
        year_counts={2006: 1200},
    )

    lines = format_validation_summary(report)

    assert "Rows: 1,200" in lines
    assert "  2006: 1,200" in lines
    assert "Found 2 issue(s):" in lines
    assert "  - unexpected_race_levels: Unknown, Mixed" in lines


def test_format_validation_summary_passed():
    report = ValidationReport(passed=True, row_count=0, column_count=11)

    assert format_validation_summary(report)[-1] == "All validation checks passed!"


def test_validation_report_is_read_only():
    issues = {"missing_columns": ["xcoord"]}
    report = ValidationReport(passed=False, issues=issues, row_count=1, column_count=10, year_counts={2006: 1})

    issues["duplicate_ids"] = "1 duplicate IDs found"
    with pytest.raises(TypeError):
        report.issues["invalid_years"] = "1 rows with year outside 2006-2012"
    with pytest.raises(TypeError):
        report.year_counts[2007] = 1

    assert list(report.issues) == ["missing_columns"]
    assert report.issues["missing_columns"] == ("xcoord",)
    assert report.to_dict()["issues"] == {"missing_columns": ["xcoord"]}
