"""Classify deliveries by distance to the assigned property."""

from __future__ import annotations

import math

import pandas as pd

from delivery_pace.common.constants import DEFAULT_THRESHOLD_METERS, DISTANCE_UNITS
from delivery_pace.common.errors import ConfigError


def _unit_factor(unit: str) -> float:
    try:
        return DISTANCE_UNITS[unit]
    except KeyError as exc:
        raise ConfigError(f"Unknown distance unit: {unit!r}") from exc


def threshold_in_unit(threshold_meters: float, unit: str) -> float:
    # 80 / 1000 yields the same float as the literal 0.08 recorded in km extracts.
    return threshold_meters / _unit_factor(unit)


def is_accurate(distance, unit: str = "m", threshold_meters: float = DEFAULT_THRESHOLD_METERS) -> bool:
    try:
        value = float(distance)
    except (TypeError, ValueError):
        return False
    if math.isnan(value):
        return False
    return value <= threshold_in_unit(threshold_meters, unit)


def flag_accuracy(
    frame: pd.DataFrame,
    unit: str,
    threshold_meters: float = DEFAULT_THRESHOLD_METERS,
) -> pd.DataFrame:
    distance = pd.to_numeric(frame["distance"], errors="coerce")
    return frame.assign(
        distance_m=distance * _unit_factor(unit),
        accurate=(distance <= threshold_in_unit(threshold_meters, unit)).fillna(False).astype(bool),
    )


def split_views(frame: pd.DataFrame) -> dict[str, pd.DataFrame]:
    return {
        "all": frame,
        "accurate": frame[frame["accurate"]].reset_index(drop=True),
    }
