"""Descriptive statistics over cleaned daily pace series."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from delivery_pace.common.constants import DEFAULT_PERCENTILES, MIN_SERIES_POINTS
from delivery_pace.common.errors import DegenerateStatisticsError
from delivery_pace.common.models import SummaryStatistics


def numeric_values(values) -> pd.Series:
    series = values if isinstance(values, pd.Series) else pd.Series(list(values), dtype=object)
    return pd.to_numeric(series, errors="coerce").dropna().astype(float)


def require_points(values: pd.Series, purpose: str) -> None:
    if len(values) < MIN_SERIES_POINTS:
        raise DegenerateStatisticsError(
            f"{purpose} needs at least {MIN_SERIES_POINTS} numeric values, got {len(values)}"
        )


def percentile(values, q: float) -> float:
    """Linear-interpolation percentile, ``q`` on the 0-100 scale."""
    series = numeric_values(values)
    if series.empty:
        raise DegenerateStatisticsError("percentile of an empty series is undefined")
    return float(series.quantile(q / 100.0, interpolation="linear"))


def summarise(values, percentiles: Iterable[int] = DEFAULT_PERCENTILES) -> SummaryStatistics:
    series = numeric_values(values)
    require_points(series, "summary statistics")
    q1, q3 = (float(q) for q in series.quantile([0.25, 0.75], interpolation="linear"))
    return SummaryStatistics(
        count=int(len(series)),
        mean=float(series.mean()),
        median=float(series.median()),
        std=float(series.std(ddof=1)),
        iqr=q3 - q1,
        percentiles={int(q): percentile(series, q) for q in percentiles},
    )
