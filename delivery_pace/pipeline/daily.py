"""Per-date delivery pace across enumerators."""

from __future__ import annotations

import numpy as np
import pandas as pd

from delivery_pace.common.errors import ConfigError


def enumerator_daily_counts(frame: pd.DataFrame) -> pd.DataFrame:
    return (
        frame.groupby(["date", "enumerator"], sort=True)
        .size()
        .rename("deliveries")
        .reset_index()
    )


def daily_pace(frame: pd.DataFrame, rounding: str = "none") -> pd.Series:
    """Mean of per-enumerator delivery counts for each date present in ``frame``.

    Each enumerator active on a date weighs equally, however many rows they
    logged. Dates with no rows never appear.
    """
    counts = enumerator_daily_counts(frame)
    pace = counts.groupby("date", sort=True)["deliveries"].mean().astype(float)
    if rounding == "ceiling":
        pace = np.ceil(pace)
    elif rounding != "none":
        raise ConfigError(f"Unknown daily pace rounding: {rounding!r}")
    pace.name = "daily_pace"
    return pace
