"""Percentage gap between the all-records and accurate-only benchmarks."""

from __future__ import annotations

import math

from delivery_pace.common.errors import UndefinedComparisonError


def percent_difference(unfiltered: float | None, filtered: float | None) -> float:
    if unfiltered is None or filtered is None:
        raise UndefinedComparisonError("both benchmarks are required for a comparison")
    unfiltered = float(unfiltered)
    filtered = float(filtered)
    if not math.isfinite(unfiltered) or not math.isfinite(filtered):
        raise UndefinedComparisonError("benchmarks must be finite numbers")
    if unfiltered == 0:
        raise UndefinedComparisonError("all-records benchmark is zero")
    return (unfiltered - filtered) / unfiltered * 100


def compare_views(benchmarks: dict[str, float | None]) -> dict:
    try:
        value = percent_difference(benchmarks.get("all"), benchmarks.get("accurate"))
    except UndefinedComparisonError as exc:
        return {"status": "undefined", "error_code": exc.error_code, "reason": str(exc)}
    return {"status": "ok", "percent_difference": value}
