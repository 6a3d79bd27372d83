"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from sqf.common.errors import ConfigError
from sqf.common.models import DateFormat


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(str(key) for key in unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_range(value, ctx: str) -> None:
    if not isinstance(value, list) or len(value) != 2 or value[0] > value[1]:
        raise ConfigError(f"{ctx} must be a [min, max] pair")


def validate_date_formats(raw: dict) -> dict[int, DateFormat]:
    if not isinstance(raw, dict) or not raw:
        raise ConfigError("date_formats must be a non-empty mapping")
    formats: dict[int, DateFormat] = {}
    for year, name in raw.items():
        try:
            formats[int(year)] = DateFormat(str(name).lower())
        except ValueError as exc:
            raise ConfigError(f"Invalid date format for {year}: {name}") from exc
    return formats


def validate_recoding_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {
        "years",
        "date_formats",
        "force_field_prefix",
        "validation",
        "output",
    }
    _assert_required_keys(cfg, top_required, "sqf config")
    _assert_no_unknown_keys(cfg, top_required, "sqf config", allow_unknown)

    if not isinstance(cfg["years"], list) or not cfg["years"]:
        raise ConfigError("years must be a non-empty list")
    date_formats = validate_date_formats(cfg["date_formats"])
    undefined = sorted(set(int(year) for year in cfg["years"]) - set(date_formats))
    if undefined:
        raise ConfigError(f"No date format for years: {', '.join(str(year) for year in undefined)}")

    if not isinstance(cfg["force_field_prefix"], str) or not cfg["force_field_prefix"]:
        raise ConfigError("force_field_prefix must be a non-empty string")

    validation_keys = {
        "year_range",
        "age_range",
        "max_age_missing_pct",
        "max_race_missing_pct",
        "max_coord_missing_pct",
    }
    _assert_required_keys(cfg["validation"], validation_keys, "validation")
    _assert_no_unknown_keys(cfg["validation"], validation_keys, "validation", allow_unknown)
    _assert_range(cfg["validation"]["year_range"], "validation.year_range")
    _assert_range(cfg["validation"]["age_range"], "validation.age_range")
    for key in ("max_age_missing_pct", "max_race_missing_pct", "max_coord_missing_pct"):
        value = cfg["validation"][key]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"validation.{key} must be a number")

    _assert_required_keys(
        cfg["output"],
        {"standardized_filename", "report_filename", "summary_filename"},
        "output",
    )
    return cfg
