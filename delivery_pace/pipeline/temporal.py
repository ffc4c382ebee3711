"""Delivery pace by day of week and time of day."""

from __future__ import annotations

import pandas as pd

from delivery_pace.common.constants import DAYS_OF_WEEK, OTHER_BRACKET, TIME_OF_DAY_BRACKETS

BRACKET_LABELS = [label for _start, _end, label in TIME_OF_DAY_BRACKETS] + [OTHER_BRACKET]


def time_of_day_bracket(hour) -> str:
    if hour is None or pd.isna(hour):
        return OTHER_BRACKET
    for start, end, label in TIME_OF_DAY_BRACKETS:
        if start <= int(hour) < end:
            return label
    return OTHER_BRACKET


def with_calendar_fields(frame: pd.DataFrame) -> pd.DataFrame:
    day_names = frame["date"].dt.day_name()
    brackets = frame["hour"].map(time_of_day_bracket)
    # Rows whose timestamp carried no time of day cannot be placed in a bracket.
    brackets = brackets.where(frame["hour"].notna())
    return frame.assign(
        day_of_week=pd.Categorical(day_names, categories=list(DAYS_OF_WEEK), ordered=True),
        time_of_day=pd.Categorical(brackets, categories=BRACKET_LABELS, ordered=True),
    )


def _cell_average(frame: pd.DataFrame, cell: list[str]) -> pd.DataFrame:
    counts = frame.groupby(["date", "enumerator", *cell], observed=True, sort=True).size().rename("deliveries")
    grouped = counts.reset_index().groupby(cell, observed=True, sort=True)["deliveries"]
    table = pd.DataFrame(
        {
            "avg_deliveries": grouped.mean().astype(float),
            "observations": grouped.size().astype(int),
        }
    )
    return table.reset_index()


def temporal_breakdown(frame: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """Three tables of mean per-enumerator deliveries for each calendar cell.

    Each enumerator's deliveries are counted per date within a cell, then the
    counts are averaged across (date, enumerator) groups. ``observations`` is
    the number of groups behind each average.
    """
    enriched = with_calendar_fields(frame)
    timed = enriched[enriched["time_of_day"].notna()]
    return {
        "by_time_of_day": _cell_average(timed, ["time_of_day"]),
        "by_day_of_week": _cell_average(enriched, ["day_of_week"]),
        "by_day_and_time": _cell_average(timed, ["day_of_week", "time_of_day"]),
    }
