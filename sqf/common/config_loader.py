"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqf.common.errors import ConfigError
from sqf.common.fs import read_yaml
from sqf.common.models import DateFormat, ValidationRules
from sqf.common.schema import validate_date_formats, validate_recoding_config

CONFIG_FILENAME = "sqf.yml"


@dataclass(frozen=True)
class ConfigBundle:
    years: tuple[int, ...]
    date_formats: dict[int, DateFormat]
    force_field_prefix: str
    validation_rules: ValidationRules
    output: dict


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def _rules_from_config(validation: dict) -> ValidationRules:
    return ValidationRules(
        year_range=tuple(validation["year_range"]),
        age_range=tuple(validation["age_range"]),
        max_age_missing_pct=float(validation["max_age_missing_pct"]),
        max_race_missing_pct=float(validation["max_race_missing_pct"]),
        max_coord_missing_pct=float(validation["max_coord_missing_pct"]),
    )


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    overlay_path = overlay_config_dir / CONFIG_FILENAME if overlay_config_dir is not None else None
    cfg = validate_recoding_config(
        _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path),
        allow_unknown=allow_unknown,
    )
    return ConfigBundle(
        years=tuple(sorted(int(year) for year in cfg["years"])),
        date_formats=validate_date_formats(cfg["date_formats"]),
        force_field_prefix=cfg["force_field_prefix"],
        validation_rules=_rules_from_config(cfg["validation"]),
        output=dict(cfg["output"]),
    )


def resolve_years(target: str, configured: tuple[int, ...]) -> list[int]:
    if target == "all":
        return list(configured)
    try:
        years = [int(part) for part in target.split(",") if part.strip()]
    except ValueError as exc:
        raise ConfigError(f"Invalid year selection: {target}") from exc
    if not years:
        raise ConfigError(f"Invalid year selection: {target}")
    return sorted(set(years))
