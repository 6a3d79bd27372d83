"""CLI entrypoint for the stop record recoding pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from sqf.common.config_loader import ConfigBundle, load_config, resolve_years
from sqf.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from sqf.common.errors import ContractError, PipelineError
from sqf.common.ids import generate_run_id
from sqf.common.logging import build_logger, close_logger, log_event
from sqf.pipeline.export import read_standardized_csv, write_standardized_csv
from sqf.pipeline.load import load_years
from sqf.pipeline.recode import run_recoding
from sqf.pipeline.reports import (
    format_validation_summary,
    summarise_recoding,
    write_recode_summary,
    write_validation_report,
)
from sqf.pipeline.validate import validate_table


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--years", default="all", help="comma separated years, or 'all'")
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--workers", type=int, default=1)
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def run_recode_stage(
    bundle: ConfigBundle,
    years: list[int],
    data_dir: Path,
    run_id: str,
    logger: logging.Logger,
    *,
    workers: int = 1,
) -> Path:
    started = time.monotonic()
    partitions = load_years(years, data_dir)
    for year, records in partitions.items():
        log_event(logger, f"loaded {len(records)} raw records", run_id=run_id, stage="recode", year=year, event="LOAD", status="ok", rows_in=len(records))

    records = run_recoding(
        partitions,
        bundle.date_formats,
        force_prefix=bundle.force_field_prefix,
        max_workers=workers,
    )
    out_path = write_standardized_csv(data_dir / "out" / bundle.output["standardized_filename"], records)

    summary = summarise_recoding(records)
    write_recode_summary(data_dir / "out" / "reports" / bundle.output["summary_filename"], summary, run_id=run_id)
    log_event(
        logger,
        f"recoded {len(records)} records; police force used in {summary['police_force_percent']:.1f}%",
        run_id=run_id,
        stage="recode",
        event="RECODE_DONE",
        status="ok",
        rows_in=sum(len(rows) for rows in partitions.values()),
        rows_out=len(records),
        duration_ms=_elapsed_ms(started),
    )
    return out_path


def run_validate_stage(
    bundle: ConfigBundle,
    data_dir: Path,
    run_id: str,
    logger: logging.Logger,
    *,
    strict: bool = False,
) -> bool:
    started = time.monotonic()
    header, rows = read_standardized_csv(data_dir / "out" / bundle.output["standardized_filename"])
    report = validate_table(rows, header, bundle.validation_rules)
    write_validation_report(data_dir / "out" / "reports" / bundle.output["report_filename"], report)

    for line in format_validation_summary(report):
        log_event(logger, line, run_id=run_id, stage="validate", event="REPORT", status="ok" if report.passed else "warn")
    log_event(
        logger,
        "validation complete",
        run_id=run_id,
        stage="validate",
        event="VALIDATE_DONE",
        status="ok" if report.passed else "warn",
        rows_in=report.row_count,
        duration_ms=_elapsed_ms(started),
    )

    if strict and not report.passed:
        raise ContractError(";".join(report.issues))
    return report.passed


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    stages = STAGES if args.command == "all" else (args.command,)
    passed = True

    try:
        bundle = load_config(config_dir, overlay_config_dir=overlay_config_dir)
        years = resolve_years(args.years, bundle.years)
        for stage in stages:
            log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
            if stage == "recode":
                run_recode_stage(bundle, years, data_dir, run_id, logger, workers=args.workers)
            elif stage == "validate":
                passed = run_validate_stage(bundle, data_dir, run_id, logger, strict=args.strict)
            log_event(logger, "stage end", run_id=run_id, stage=stage, event="STAGE_END", status="ok")
    except PipelineError as exc:
        log_event(logger, f"run failed: {exc}", run_id=run_id, event="STAGE_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    except Exception as exc:
        log_event(
            logger,
            f"unexpected failure: {exc!r}",
            run_id=run_id,
            event="STAGE_FAIL",
            status="error",
            error_code="UNEXPECTED_ERROR",
        )
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)

    if not passed:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
