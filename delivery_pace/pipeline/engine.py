"""Parameterised benchmark engine for a single site."""

from __future__ import annotations

import logging

import pandas as pd

from delivery_pace.common.constants import VIEWS
from delivery_pace.common.errors import DegenerateStatisticsError
from delivery_pace.common.logging import log_event
from delivery_pace.pipeline.accuracy import flag_accuracy, split_views
from delivery_pace.pipeline.comparison import compare_views
from delivery_pace.pipeline.daily import daily_pace
from delivery_pace.pipeline.datetimes import drop_missing_enumerators, normalise_timestamps
from delivery_pace.pipeline.outliers import remove_outliers
from delivery_pace.pipeline.summary import summarise
from delivery_pace.pipeline.temporal import temporal_breakdown

RECORD_COLUMNS = ["enumerator", "date", "hour", "date_format", "distance_m", "accurate"]


def normalise_site(
    raw: pd.DataFrame,
    site_cfg: dict,
    settings: dict,
    *,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> tuple[pd.DataFrame, dict]:
    site = site_cfg["site"]["key"]
    records, missing_enumerator = drop_missing_enumerators(raw)
    records, audit = normalise_timestamps(records, site_cfg["date_formats"])
    records = flag_accuracy(records, site_cfg["distance_unit"], float(settings["accuracy"]["threshold_meters"]))

    if missing_enumerator:
        log_event(
            logger,
            f"{missing_enumerator} rows without an enumerator excluded",
            level=logging.WARNING,
            run_id=run_id,
            stage="normalise",
            site=site,
            event="ENUMERATOR_MISSING",
            rows_in=len(raw),
            rows_out=len(raw) - missing_enumerator,
        )
    if audit.missing:
        log_event(
            logger,
            f"{audit.missing} rows without a delivery timestamp excluded",
            level=logging.WARNING,
            run_id=run_id,
            stage="normalise",
            site=site,
            event="TIMESTAMPS_MISSING",
            rows_in=audit.rows_in,
            rows_out=audit.rows_in - audit.missing,
        )
    if audit.unparseable:
        log_event(
            logger,
            f"{audit.unparseable} timestamps matched no configured format, e.g. {audit.unparseable_samples[:3]}",
            level=logging.WARNING,
            run_id=run_id,
            stage="normalise",
            site=site,
            event="TIMESTAMPS_UNPARSEABLE",
            rows_in=audit.rows_in - audit.missing,
            rows_out=audit.parsed,
        )

    columns = [col for col in RECORD_COLUMNS if col in records.columns]
    if "property_type" in records.columns:
        columns.append("property_type")

    audit_payload = {
        "raw_rows": int(len(raw)),
        "missing_enumerator": missing_enumerator,
        "timestamps": audit.to_dict(),
        "normalised_rows": int(len(records)),
        "accurate_rows": int(records["accurate"].sum()),
    }
    return records[columns], audit_payload


def benchmark_view(
    records: pd.DataFrame,
    settings: dict,
) -> dict:
    daily = daily_pace(records, rounding=settings["daily_pace"]["rounding"])
    result = {"daily_pace": daily, "outliers": None, "summary": None}
    try:
        outliers = remove_outliers(daily, multiplier=float(settings["outliers"]["iqr_multiplier"]))
        summary = summarise(outliers.retained, percentiles=settings["summary"]["percentiles"])
    except DegenerateStatisticsError as exc:
        result.update(status="degenerate", error_code=exc.error_code, reason=str(exc), benchmark=None)
        return result
    result.update(status="ok", outliers=outliers, summary=summary, benchmark=summary.mean)
    return result


def benchmark_site(
    records: pd.DataFrame,
    site_cfg: dict,
    settings: dict,
    *,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> dict:
    site = site_cfg["site"]["key"]
    views = split_views(records)
    results: dict[str, dict] = {}

    for view in VIEWS:
        result = benchmark_view(views[view], settings)
        results[view] = result
        if result["status"] != "ok":
            log_event(
                logger,
                f"no benchmark for view {view}: {result['reason']}",
                level=logging.WARNING,
                run_id=run_id,
                stage="benchmark",
                site=site,
                view=view,
                event="VIEW_DEGENERATE",
                status="warning",
                error_code=result["error_code"],
            )
            continue
        outliers = result["outliers"]
        log_event(
            logger,
            f"removed {outliers.dropped_count} outlier days outside [{outliers.lower:.2f}, {outliers.upper:.2f}]",
            run_id=run_id,
            stage="benchmark",
            site=site,
            view=view,
            event="OUTLIERS_REMOVED",
            rows_in=outliers.input_count,
            rows_out=len(outliers.retained),
        )
        log_event(
            logger,
            f"benchmark {result['benchmark']:.2f} deliveries per enumerator per day",
            run_id=run_id,
            stage="benchmark",
            site=site,
            view=view,
            event="SITE_BENCHMARK",
        )

    comparison = compare_views({view: results[view]["benchmark"] for view in VIEWS})
    if comparison["status"] != "ok":
        log_event(
            logger,
            f"comparison undefined: {comparison['reason']}",
            level=logging.WARNING,
            run_id=run_id,
            stage="benchmark",
            site=site,
            event="COMPARISON_UNDEFINED",
            status="warning",
            error_code=comparison["error_code"],
        )

    return {"views": results, "comparison": comparison}


def temporal_site(records: pd.DataFrame) -> dict[str, dict[str, pd.DataFrame]]:
    return {view: temporal_breakdown(frame) for view, frame in split_views(records).items()}


def run_site_pipeline(
    raw: pd.DataFrame,
    site_cfg: dict,
    settings: dict,
    *,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> dict:
    records, audit = normalise_site(raw, site_cfg, settings, logger=logger, run_id=run_id)
    benchmarks = benchmark_site(records, site_cfg, settings, logger=logger, run_id=run_id)
    return {
        "site": site_cfg["site"]["key"],
        "records": records,
        "audit": audit,
        "views": benchmarks["views"],
        "comparison": benchmarks["comparison"],
        "temporal": temporal_site(records),
    }
