"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from delivery_pace.common.constants import (
    CANONICAL_COLUMNS,
    DAILY_PACE_ROUNDING,
    DISTANCE_UNITS,
    REQUIRED_COLUMNS,
)
from delivery_pace.common.errors import ConfigError


def _assert_mapping(obj, ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    _assert_mapping(obj, ctx)
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def validate_site_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {
        "site",
        "inputs",
        "columns",
        "distance_unit",
        "date_formats",
    }
    top_known = top_required | {"property_type_delimiter"}
    _assert_required_keys(cfg, top_required, "site config")
    _assert_no_unknown_keys(cfg, top_known, "site config", allow_unknown)

    _assert_required_keys(cfg["site"], {"key", "city", "year"}, "site")
    _assert_required_keys(cfg["columns"], set(REQUIRED_COLUMNS), "columns")
    _assert_no_unknown_keys(cfg["columns"], set(CANONICAL_COLUMNS), "columns", allow_unknown)

    if not isinstance(cfg["inputs"], list) or not cfg["inputs"]:
        raise ConfigError("inputs must be a non-empty list")
    if not isinstance(cfg["date_formats"], list) or not cfg["date_formats"]:
        raise ConfigError("date_formats must be a non-empty list")
    if cfg["distance_unit"] not in DISTANCE_UNITS:
        allowed = ", ".join(sorted(DISTANCE_UNITS))
        raise ConfigError(f"distance_unit must be one of: {allowed}")

    delimiter = cfg.get("property_type_delimiter")
    if delimiter is not None and (not isinstance(delimiter, str) or not delimiter):
        raise ConfigError("property_type_delimiter must be a non-empty string or null")
    if delimiter and not cfg["columns"].get("property_type"):
        raise ConfigError("property_type_delimiter requires a columns.property_type mapping")

    return cfg


def validate_pipeline_config(cfg: dict) -> dict:
    _assert_required_keys(cfg, {"accuracy", "outliers", "summary", "daily_pace", "output"}, "pipeline")
    _assert_required_keys(cfg["accuracy"], {"threshold_meters"}, "accuracy")
    _assert_required_keys(cfg["outliers"], {"iqr_multiplier"}, "outliers")
    _assert_required_keys(cfg["summary"], {"percentiles"}, "summary")
    _assert_required_keys(cfg["daily_pace"], {"rounding"}, "daily_pace")
    _assert_required_keys(cfg["output"], {"benchmarks_filename", "comparisons_filename"}, "output")

    if float(cfg["accuracy"]["threshold_meters"]) <= 0:
        raise ConfigError("accuracy.threshold_meters must be positive")
    if float(cfg["outliers"]["iqr_multiplier"]) < 0:
        raise ConfigError("outliers.iqr_multiplier must not be negative")

    percentiles = cfg["summary"]["percentiles"]
    if not isinstance(percentiles, list) or not all(0 <= int(q) <= 100 for q in percentiles):
        raise ConfigError("summary.percentiles must be a list of values between 0 and 100")

    if cfg["daily_pace"]["rounding"] not in DAILY_PACE_ROUNDING:
        allowed = ", ".join(DAILY_PACE_ROUNDING)
        raise ConfigError(f"daily_pace.rounding must be one of: {allowed}")

    return cfg
