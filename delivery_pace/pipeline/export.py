"""Cross-site benchmark and comparison tables."""

from __future__ import annotations

from pathlib import Path

from delivery_pace.common.constants import VIEWS
from delivery_pace.common.fs import write_csv
from delivery_pace.pipeline.reports import load_site_reports

BENCHMARK_HEADERS = [
    "site",
    "city",
    "year",
    "view",
    "status",
    "days",
    "outlier_days",
    "mean",
    "median",
    "sd",
    "iqr",
    "p80",
    "p90",
]

COMPARISON_HEADERS = [
    "site",
    "city",
    "year",
    "all_benchmark",
    "accurate_benchmark",
    "status",
    "percent_difference",
]


def _serialize_row(row: dict, headers: list[str]) -> dict:
    out = {}
    for key in headers:
        value = row.get(key)
        if value is None:
            out[key] = ""
        elif isinstance(value, float):
            out[key] = f"{value:.4f}"
        else:
            out[key] = value
    return out


def _benchmark_rows(report: dict) -> list[dict]:
    rows = []
    for view in VIEWS:
        view_report = report["views"][view]
        summary = view_report.get("summary", {})
        outliers = view_report.get("outliers", {})
        rows.append(
            {
                "site": report["site"],
                "city": report["city"],
                "year": report["year"],
                "view": view,
                "status": view_report["status"],
                "days": view_report["days"],
                "outlier_days": outliers.get("dropped_count"),
                "mean": summary.get("mean"),
                "median": summary.get("median"),
                "sd": summary.get("std"),
                "iqr": summary.get("iqr"),
                "p80": summary.get("p80"),
                "p90": summary.get("p90"),
            }
        )
    return rows


def _comparison_row(report: dict) -> dict:
    comparison = report.get("comparison", {})
    return {
        "site": report["site"],
        "city": report["city"],
        "year": report["year"],
        "all_benchmark": report["views"]["all"]["benchmark"],
        "accurate_benchmark": report["views"]["accurate"]["benchmark"],
        "status": comparison.get("status"),
        "percent_difference": comparison.get("percent_difference"),
    }


def write_benchmark_tables(pipeline_cfg: dict, data_dir: Path, sites: list[str]) -> tuple[Path, Path]:
    reports = [report for report in load_site_reports(data_dir, sorted(sites)).values() if report is not None]

    benchmark_rows = [row for report in reports for row in _benchmark_rows(report)]
    comparison_rows = [_comparison_row(report) for report in reports]

    output = pipeline_cfg["output"]
    benchmarks_path = data_dir / "out" / output["benchmarks_filename"]
    comparisons_path = data_dir / "out" / output["comparisons_filename"]
    write_csv(benchmarks_path, BENCHMARK_HEADERS, [_serialize_row(row, BENCHMARK_HEADERS) for row in benchmark_rows])
    write_csv(
        comparisons_path,
        COMPARISON_HEADERS,
        [_serialize_row(row, COMPARISON_HEADERS) for row in comparison_rows],
    )
    return benchmarks_path, comparisons_path
