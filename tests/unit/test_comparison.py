import math

import pytest

from delivery_pace.common.errors import DegenerateStatisticsError, UndefinedComparisonError
from delivery_pace.pipeline.comparison import compare_views, percent_difference


def test_reproduces_published_makeni_2025_gap():
    assert abs(percent_difference(32.19, 31.75) - 1.37) <= 0.01


def test_accurate_benchmark_above_unfiltered_gives_negative_gap():
    assert percent_difference(10.0, 11.0) == pytest.approx(-10.0)


@pytest.mark.parametrize("unfiltered", [0, 0.0, None, math.nan, math.inf])
def test_undefined_denominator_is_signalled(unfiltered):
    with pytest.raises(UndefinedComparisonError):
        percent_difference(unfiltered, 5.0)


def test_undefined_comparison_is_a_degenerate_statistic():
    assert issubclass(UndefinedComparisonError, DegenerateStatisticsError)


def test_compare_views_reports_status():
    ok = compare_views({"all": 20.0, "accurate": 19.0})
    assert ok["status"] == "ok"
    assert ok["percent_difference"] == pytest.approx(5.0)

    undefined = compare_views({"all": 20.0, "accurate": None})
    assert undefined["status"] == "undefined"
    assert undefined["error_code"] == "UNDEFINED_COMPARISON"
