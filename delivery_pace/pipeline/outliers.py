"""Interquartile-range outlier removal for daily pace series."""

from __future__ import annotations

import pandas as pd

from delivery_pace.common.constants import DEFAULT_IQR_MULTIPLIER
from delivery_pace.common.models import OutlierResult
from delivery_pace.pipeline.summary import numeric_values, require_points


def remove_outliers(daily: pd.Series, multiplier: float = DEFAULT_IQR_MULTIPLIER) -> OutlierResult:
    """Keep values inside [Q1 - k*IQR, Q3 + k*IQR].

    The quartiles come from the full input series and are not recomputed
    after filtering. Both fences are inclusive.
    """
    values = numeric_values(daily)
    require_points(values, "outlier removal")

    q1, q3 = (float(q) for q in values.quantile([0.25, 0.75], interpolation="linear"))
    iqr = q3 - q1
    lower = q1 - multiplier * iqr
    upper = q3 + multiplier * iqr

    retained = values[(values >= lower) & (values <= upper)]
    return OutlierResult(
        retained=retained,
        q1=q1,
        q3=q3,
        iqr=iqr,
        lower=lower,
        upper=upper,
        input_count=int(len(values)),
    )
