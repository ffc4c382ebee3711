"""Parse delivery timestamps recorded in inconsistent textual formats."""

from __future__ import annotations

from datetime import date

import pandas as pd

from delivery_pace.common.constants import MAX_UNPARSEABLE_SAMPLES
from delivery_pace.common.models import TimestampAudit

_TIME_DIRECTIVES = ("%H", "%I")


def _has_time(fmt: str) -> bool:
    return any(directive in fmt for directive in _TIME_DIRECTIVES)


def _blank_mask(values: pd.Series) -> pd.Series:
    return values.isna() | values.astype(str).str.strip().eq("")


def normalise_timestamps(
    frame: pd.DataFrame,
    date_formats: list[str],
    column: str = "delivered_on",
) -> tuple[pd.DataFrame, TimestampAudit]:
    """Attach ``date``, ``hour`` and ``date_format`` to every parseable row.

    Formats are tried in order and the first exact match wins. Blank values
    are counted as missing and never tried. Values no format matches are
    counted as unparseable. Both kinds of row are dropped from the result.
    """
    raw = frame[column]
    missing = _blank_mask(raw)
    cleaned = raw.where(~missing).astype("string").str.strip()

    parsed = pd.Series(pd.NaT, index=frame.index, dtype="datetime64[ns]")
    matched = pd.Series(pd.NA, index=frame.index, dtype="string")
    parsed_by_format: dict[str, int] = {}

    for fmt in date_formats:
        pending = ~missing & parsed.isna()
        if not pending.any():
            break
        attempt = pd.to_datetime(cleaned[pending].astype(object), format=fmt, errors="coerce")
        hits = attempt.dropna()
        if hits.empty:
            continue
        parsed.loc[hits.index] = hits
        matched.loc[hits.index] = fmt
        parsed_by_format[fmt] = int(len(hits))

    unparseable = ~missing & parsed.isna()
    samples = cleaned[unparseable].head(MAX_UNPARSEABLE_SAMPLES).tolist()

    keep = parsed.notna()
    time_formats = {fmt for fmt in date_formats if _has_time(fmt)}
    has_time = matched[keep].isin(time_formats).fillna(False).astype(bool)
    hours = parsed[keep].dt.hour.astype("Int64").where(has_time, pd.NA)

    out = frame[keep].assign(
        date=parsed[keep].dt.normalize(),
        hour=hours,
        date_format=matched[keep],
    )

    audit = TimestampAudit(
        rows_in=int(len(frame)),
        missing=int(missing.sum()),
        unparseable=int(unparseable.sum()),
        parsed=int(keep.sum()),
        parsed_by_format=parsed_by_format,
        unparseable_samples=[str(sample) for sample in samples],
    )
    return out.reset_index(drop=True), audit


def parse_timestamp(raw: str | None, date_formats: list[str]) -> tuple[date, int | None] | None:
    frame = pd.DataFrame({"delivered_on": [raw]}, dtype=object)
    parsed, _audit = normalise_timestamps(frame, date_formats)
    if parsed.empty:
        return None
    row = parsed.iloc[0]
    hour = None if pd.isna(row["hour"]) else int(row["hour"])
    return row["date"].date(), hour


def drop_missing_enumerators(frame: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    missing = _blank_mask(frame["enumerator"])
    kept = frame[~missing].assign(enumerator=frame.loc[~missing, "enumerator"].astype(str).str.strip())
    return kept.reset_index(drop=True), int(missing.sum())
