import pandas as pd
import pytest

from delivery_pace.common.errors import ConfigError
from delivery_pace.pipeline.daily import daily_pace, enumerator_daily_counts


def _records(counts_by_date: dict[str, dict[str, int]]) -> pd.DataFrame:
    rows = []
    for day, counts in counts_by_date.items():
        for enumerator, count in counts.items():
            rows.extend({"date": pd.Timestamp(day), "enumerator": enumerator} for _ in range(count))
    return pd.DataFrame(rows)


def test_daily_pace_is_unweighted_mean_across_enumerators():
    records = _records({"2025-01-06": {"a": 3, "b": 5, "c": 4}})

    pace = daily_pace(records)

    assert pace.loc[pd.Timestamp("2025-01-06")] == 4.0


def test_single_enumerator_day_is_valid_and_missing_dates_are_not_filled():
    records = _records({"2025-01-08": {"a": 7}, "2025-01-06": {"a": 2, "b": 4}})

    pace = daily_pace(records)

    assert list(pace.index) == [pd.Timestamp("2025-01-06"), pd.Timestamp("2025-01-08")]
    assert pace.tolist() == [3.0, 7.0]
    assert pace.name == "daily_pace"


def test_enumerator_daily_counts_are_exact():
    records = _records({"2025-01-06": {"a": 3, "b": 5}})

    counts = enumerator_daily_counts(records)

    assert counts["deliveries"].tolist() == [3, 5]


def test_ceiling_rounding_matches_published_method():
    records = _records({"2025-01-06": {"a": 3, "b": 4}})

    assert daily_pace(records).iloc[0] == 3.5
    assert daily_pace(records, rounding="ceiling").iloc[0] == 4.0


def test_unknown_rounding_is_rejected():
    records = _records({"2025-01-06": {"a": 1}})
    with pytest.raises(ConfigError):
        daily_pace(records, rounding="floor")
