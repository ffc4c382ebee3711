"""Stage runners that move one site's data between disk and the engine."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import pandas as pd

from delivery_pace.common.errors import StageError
from delivery_pace.common.fs import read_json, write_frame, write_json
from delivery_pace.pipeline.engine import benchmark_site, normalise_site, temporal_site
from delivery_pace.pipeline.ingest import load_site_frame
from delivery_pace.pipeline.reports import site_report_path, write_site_report


def records_path(data_dir: Path, site: str) -> Path:
    return data_dir / "intermediate" / f"{site}_records.csv"


def audit_path(data_dir: Path, site: str) -> Path:
    return data_dir / "intermediate" / f"{site}_audit.json"


def clear_site_outputs(data_dir: Path, site: str) -> None:
    """Remove everything a previous run derived for the site."""
    for path in (records_path(data_dir, site), audit_path(data_dir, site), site_report_path(data_dir, site)):
        path.unlink(missing_ok=True)
    shutil.rmtree(data_dir / "out" / site, ignore_errors=True)


def read_records(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise StageError(f"Missing normalised records, run the normalise stage first: {path}")
    frame = pd.read_csv(
        path,
        dtype={"enumerator": str, "date_format": str},
        keep_default_na=False,
        na_values={"hour": [""], "distance_m": [""]},
    )
    return frame.assign(
        date=pd.to_datetime(frame["date"], format="%Y-%m-%d"),
        hour=frame["hour"].astype("Int64"),
        accurate=frame["accurate"].astype(str).eq("True"),
    )


def run_normalise(
    site_cfg: dict,
    settings: dict,
    data_dir: Path,
    *,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> dict:
    site = site_cfg["site"]["key"]
    clear_site_outputs(data_dir, site)
    raw = load_site_frame(site_cfg, data_dir / "raw")
    records, audit = normalise_site(raw, site_cfg, settings, logger=logger, run_id=run_id)
    write_frame(records_path(data_dir, site), records)
    write_json(audit_path(data_dir, site), audit)
    return audit


def _daily_pace_frame(view_result: dict) -> pd.DataFrame:
    daily = view_result["daily_pace"]
    frame = daily.rename_axis("date").reset_index()
    outliers = view_result["outliers"]
    if outliers is None:
        return frame.assign(retained=pd.NA)
    return frame.assign(retained=daily.index.isin(outliers.retained.index))


def run_benchmark(
    site_cfg: dict,
    settings: dict,
    data_dir: Path,
    run_id: str,
    run_date: str,
    *,
    logger: logging.Logger | None = None,
) -> Path:
    site = site_cfg["site"]["key"]
    site_report_path(data_dir, site).unlink(missing_ok=True)
    records = read_records(records_path(data_dir, site))
    audit = read_json(audit_path(data_dir, site)) if audit_path(data_dir, site).exists() else {}

    result = benchmark_site(records, site_cfg, settings, logger=logger, run_id=run_id)
    for view, view_result in result["views"].items():
        write_frame(data_dir / "out" / site / f"daily_pace_{view}.csv", _daily_pace_frame(view_result))

    return write_site_report(site_cfg, audit, result, data_dir, run_id=run_id, run_date=run_date)


def run_temporal(site_cfg: dict, data_dir: Path) -> list[Path]:
    site = site_cfg["site"]["key"]
    records = read_records(records_path(data_dir, site))
    written: list[Path] = []
    for view, tables in temporal_site(records).items():
        for name, table in tables.items():
            path = data_dir / "out" / site / "temporal" / f"{view}_{name}.csv"
            write_frame(path, table)
            written.append(path)
    return written
