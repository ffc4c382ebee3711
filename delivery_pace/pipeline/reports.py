"""Site quality reports and run report aggregation."""

from __future__ import annotations

from pathlib import Path

from delivery_pace.common.constants import VIEWS
from delivery_pace.common.fs import read_json, write_json


def site_report_path(data_dir: Path, site: str) -> Path:
    return data_dir / "out" / "reports" / f"{site}_report.json"


def _view_payload(view_result: dict) -> dict:
    payload = {
        "status": view_result["status"],
        "days": int(len(view_result["daily_pace"])),
        "benchmark": view_result["benchmark"],
    }
    if view_result["status"] == "ok":
        payload["summary"] = view_result["summary"].to_dict()
        payload["outliers"] = view_result["outliers"].to_dict()
    else:
        payload["error_code"] = view_result["error_code"]
        payload["reason"] = view_result["reason"]
    return payload


def write_site_report(
    site_cfg: dict,
    audit: dict,
    result: dict,
    data_dir: Path,
    *,
    run_id: str,
    run_date: str,
) -> Path:
    site = site_cfg["site"]
    timestamps = audit.get("timestamps", {})
    warnings: list[str] = []

    if int(audit.get("missing_enumerator", 0)) > 0:
        warnings.append("ENUMERATOR_MISSING")
    if int(timestamps.get("unparseable", 0)) > 0:
        warnings.append("TIMESTAMPS_UNPARSEABLE")
    for view in VIEWS:
        if result["views"][view]["status"] != "ok":
            warnings.append(f"VIEW_DEGENERATE:{view}")
    if result["comparison"]["status"] != "ok":
        warnings.append("COMPARISON_UNDEFINED")

    payload = {
        "site": site["key"],
        "city": site["city"],
        "year": site["year"],
        "run_id": run_id,
        "run_date": run_date,
        "counts": {
            "raw_rows": int(audit.get("raw_rows", 0)),
            "missing_enumerator": int(audit.get("missing_enumerator", 0)),
            "missing_timestamps": int(timestamps.get("missing", 0)),
            "unparseable_timestamps": int(timestamps.get("unparseable", 0)),
            "normalised_rows": int(audit.get("normalised_rows", 0)),
            "accurate_rows": int(audit.get("accurate_rows", 0)),
        },
        "timestamps": {
            "parsed_by_format": timestamps.get("parsed_by_format", {}),
            "unparseable_samples": timestamps.get("unparseable_samples", []),
        },
        "views": {view: _view_payload(result["views"][view]) for view in VIEWS},
        "comparison": result["comparison"],
        "warnings": warnings,
        "errors": [],
    }

    report_path = site_report_path(data_dir, site["key"])
    write_json(report_path, payload)
    return report_path


def load_site_reports(data_dir: Path, sites: list[str]) -> dict[str, dict | None]:
    reports: dict[str, dict | None] = {}
    for site in sites:
        path = site_report_path(data_dir, site)
        reports[site] = read_json(path) if path.exists() else None
    return reports


def write_run_summary(
    data_dir: Path,
    run_id: str,
    run_date: str,
    sites: list[str],
    failures: dict[str, list[dict]] | None = None,
) -> Path:
    failures = failures or {}
    site_reports = {}
    totals = {
        "raw_rows": 0,
        "normalised_rows": 0,
        "accurate_rows": 0,
        "missing_timestamps": 0,
        "unparseable_timestamps": 0,
        "missing_enumerator": 0,
    }
    warning_count = 0
    error_count = 0

    for site, report in load_site_reports(data_dir, sites).items():
        if site in failures:
            site_reports[site] = {"status": "failed", "errors": failures[site]}
            error_count += len(failures[site])
            continue
        if report is None:
            site_reports[site] = {"status": "missing_report"}
            error_count += 1
            continue

        site_reports[site] = {
            "benchmarks": {view: report["views"][view]["benchmark"] for view in VIEWS},
            "comparison": report.get("comparison", {}),
            "warnings": report.get("warnings", []),
            "errors": report.get("errors", []),
        }

        counts = report.get("counts", {})
        for key in totals:
            totals[key] += int(counts.get(key, 0))

        warning_count += len(report.get("warnings", []))
        error_count += len(report.get("errors", []))

    status = "success"
    if error_count > 0:
        status = "error"
    elif warning_count > 0:
        status = "partial"

    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    payload = {
        "run_id": run_id,
        "run_date": run_date,
        "status": status,
        "sites": sites,
        "totals": totals,
        "warning_count": warning_count,
        "error_count": error_count,
        "site_reports": site_reports,
    }
    write_json(summary_path, payload)
    return summary_path
