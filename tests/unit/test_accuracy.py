import math

import pandas as pd
import pytest

from delivery_pace.pipeline.accuracy import flag_accuracy, is_accurate, split_views, threshold_in_unit


def test_threshold_boundary_is_inclusive_in_meters():
    assert is_accurate(80, "m") is True
    assert is_accurate("80", "m") is True
    assert is_accurate(80.01, "m") is False


def test_threshold_boundary_is_inclusive_in_kilometres():
    assert threshold_in_unit(80, "km") == 0.08
    assert is_accurate(0.08, "km") is True
    assert is_accurate("0.08", "km") is True
    assert is_accurate(0.0801, "km") is False


def test_missing_or_non_numeric_distance_is_not_accurate():
    assert is_accurate(None) is False
    assert is_accurate("far") is False
    assert is_accurate(math.nan) is False


def test_predicate_is_deterministic():
    results = {is_accurate(79.5, "m", threshold_meters=80) for _ in range(10)}
    assert results == {True}


def test_flag_accuracy_adds_meters_and_flag_without_mutating_input():
    frame = pd.DataFrame({"enumerator": ["a", "b", "c", "d"], "distance": ["80", "81", "", "0.5"]})

    flagged = flag_accuracy(frame, "m", 80)

    assert "accurate" not in frame.columns
    assert flagged["accurate"].tolist() == [True, False, False, True]
    assert flagged["distance_m"].iloc[0] == 80.0
    assert pd.isna(flagged["distance_m"].iloc[2])


def test_flag_accuracy_normalises_kilometres():
    frame = pd.DataFrame({"enumerator": ["a", "b"], "distance": ["0.08", "0.081"]})

    flagged = flag_accuracy(frame, "km", 80)

    assert flagged["accurate"].tolist() == [True, False]
    assert flagged["distance_m"].tolist() == pytest.approx([80.0, 81.0])


def test_split_views_keeps_full_and_accurate_records():
    frame = pd.DataFrame({"enumerator": ["a", "b", "c"], "distance": [10, 200, 80]})

    views = split_views(flag_accuracy(frame, "m", 80))

    assert len(views["all"]) == 3
    assert views["accurate"]["enumerator"].tolist() == ["a", "c"]
