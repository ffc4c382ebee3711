"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class TimestampAudit:
    rows_in: int
    missing: int
    unparseable: int
    parsed: int
    parsed_by_format: dict[str, int] = field(default_factory=dict)
    unparseable_samples: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "rows_in": self.rows_in,
            "missing": self.missing,
            "unparseable": self.unparseable,
            "parsed": self.parsed,
            "parsed_by_format": dict(self.parsed_by_format),
            "unparseable_samples": list(self.unparseable_samples),
        }


@dataclass(frozen=True)
class OutlierResult:
    retained: pd.Series
    q1: float
    q3: float
    iqr: float
    lower: float
    upper: float
    input_count: int

    @property
    def dropped_count(self) -> int:
        return self.input_count - len(self.retained)

    def to_dict(self) -> dict[str, Any]:
        return {
            "q1": self.q1,
            "q3": self.q3,
            "iqr": self.iqr,
            "lower": self.lower,
            "upper": self.upper,
            "input_count": self.input_count,
            "retained_count": len(self.retained),
            "dropped_count": self.dropped_count,
        }


@dataclass(frozen=True)
class SummaryStatistics:
    count: int
    mean: float
    median: float
    std: float
    iqr: float
    percentiles: dict[int, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "std": self.std,
            "iqr": self.iqr,
        }
        for q, value in sorted(self.percentiles.items()):
            out[f"p{q}"] = value
        return out
