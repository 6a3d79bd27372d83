import json
import shutil
from pathlib import Path

import pytest

from sqf.cli import main, parse_args, run_command
from sqf.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS

REPO_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = REPO_ROOT / "config"
FIXTURE_RAW = REPO_ROOT / "tests" / "fixtures" / "raw"


def _data_dir(tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    shutil.copytree(FIXTURE_RAW, data_dir / "raw")
    return data_dir


def _args(data_dir: Path, *extra: str):
    return parse_args(
        [
            "all",
            "--years",
            "2006,2007",
            "--config-dir",
            str(CONFIG_DIR),
            "--data-dir",
            str(data_dir),
            "--run-id",
            "run-test",
            *extra,
        ]
    )


@pytest.mark.integration
def test_cli_all_generates_expected_artifacts(tmp_path: Path):
    data_dir = _data_dir(tmp_path)

    exit_code = run_command(_args(data_dir))

    assert exit_code == EXIT_SUCCESS
    clean = (data_dir / "out" / "sqf_clean.csv").read_text(encoding="utf-8").splitlines()
    assert len(clean) == 8
    assert clean[1] == "2006-1,2006-01-15,2006-01-15T14:30,2006,White,true,25,true,14,987654.0,212345.0"
    assert clean[5].startswith("2007-1,2007-01-15,2007-01-15T08:30,2007,Hispanic,false,22,true,")

    report = json.loads((data_dir / "out" / "reports" / "validation_report.json").read_text(encoding="utf-8"))
    assert report["passed"] is True
    assert report["year_counts"] == {"2006": 4, "2007": 3}

    summary = json.loads((data_dir / "out" / "reports" / "recode_summary.json").read_text(encoding="utf-8"))
    assert summary["run_id"] == "run-test"
    assert summary["rows_per_year"] == {"2006": 4, "2007": 3}
    assert (data_dir / "run_meta" / "run-test.log.jsonl").exists()


@pytest.mark.integration
def test_cli_reports_partial_on_validation_issues(tmp_path: Path):
    data_dir = tmp_path / "data"
    (data_dir / "raw").mkdir(parents=True)
    (data_dir / "raw" / "2008.csv").write_text(
        "datestop,timestop,race,sex,age,pct,xcoord,ycoord\n"
        "01012008,100,X,M,30,1,,\n"
        "01022008,200,W,F,31,2,,\n",
        encoding="utf-8",
    )
    args = parse_args(["all", "--years", "2008", "--config-dir", str(CONFIG_DIR), "--data-dir", str(data_dir), "--run-id", "run-x"])

    assert run_command(args) == EXIT_PARTIAL

    report = json.loads((data_dir / "out" / "reports" / "validation_report.json").read_text(encoding="utf-8"))
    assert set(report["issues"]) == {"high_race_missing", "high_xcoord_missing", "high_ycoord_missing"}


@pytest.mark.integration
def test_cli_strict_mode_fails_hard_on_validation_issues(tmp_path: Path):
    data_dir = tmp_path / "data"
    (data_dir / "raw").mkdir(parents=True)
    (data_dir / "raw" / "2009.csv").write_text("datestop,race\n01012009,X\n", encoding="utf-8")
    args = parse_args(
        ["all", "--years", "2009", "--config-dir", str(CONFIG_DIR), "--data-dir", str(data_dir), "--run-id", "run-s", "--strict"]
    )

    assert run_command(args) == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_missing_raw_file_fails_hard(tmp_path: Path):
    data_dir = tmp_path / "data"

    exit_code = main(["recode", "--years", "2010", "--config-dir", str(CONFIG_DIR), "--data-dir", str(data_dir), "--run-id", "run-m"])

    assert exit_code == EXIT_HARD_FAIL


@pytest.mark.integration
def test_cli_logs_unexpected_failures(tmp_path: Path, monkeypatch):
    data_dir = _data_dir(tmp_path)

    def _boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("sqf.cli.run_recoding", _boom)

    exit_code = main(["recode", "--years", "2006", "--config-dir", str(CONFIG_DIR), "--data-dir", str(data_dir), "--run-id", "run-u"])

    assert exit_code == EXIT_HARD_FAIL
    events = [json.loads(line) for line in (data_dir / "run_meta" / "run-u.log.jsonl").read_text(encoding="utf-8").splitlines()]
    failure = events[-1]
    assert failure["event"] == "STAGE_FAIL"
    assert failure["status"] == "error"
    assert failure["error_code"] == "UNEXPECTED_ERROR"
    assert "boom" in failure["message"]


@pytest.mark.integration
def test_cli_recodes_latin1_raw_file(tmp_path: Path):
    data_dir = tmp_path / "data"
    (data_dir / "raw").mkdir(parents=True)
    (data_dir / "raw" / "2008.csv").write_bytes(b"datestop,timestop,race,sex,age,addrpct\n01012008,100,W,F,25,caf\xe9\n")

    exit_code = main(["recode", "--years", "2008", "--config-dir", str(CONFIG_DIR), "--data-dir", str(data_dir), "--run-id", "run-l"])

    assert exit_code == EXIT_SUCCESS
    clean = (data_dir / "out" / "sqf_clean.csv").read_text(encoding="utf-8").splitlines()
    assert clean[1].startswith("2008-1,2008-01-01,2008-01-01T01:00,2008,White,true,25,false,")
