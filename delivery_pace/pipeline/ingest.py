"""Read site extracts and map them onto canonical delivery columns."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from delivery_pace.common.columns import clean_names
from delivery_pace.common.errors import SourceSchemaError, StageError

EXCEL_SUFFIXES = {".xlsx", ".xls"}


def read_extract(path: Path) -> pd.DataFrame:
    if not path.exists():
        raise StageError(f"Missing input extract: {path}")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        frame = pd.read_csv(path, dtype=str)
    elif suffix in EXCEL_SUFFIXES:
        frame = pd.read_excel(path, dtype=str)
    else:
        raise StageError(f"Unsupported extract format: {path.name}")
    frame.columns = clean_names(list(frame.columns))
    return frame


def map_columns(frame: pd.DataFrame, columns: dict, *, source: str = "extract") -> pd.DataFrame:
    mapping = {canonical: source_col for canonical, source_col in columns.items() if source_col}
    missing = sorted(col for col in mapping.values() if col not in frame.columns)
    if missing:
        raise SourceSchemaError(f"{source} is missing mapped columns: {', '.join(missing)}")
    return frame[list(mapping.values())].rename(columns={v: k for k, v in mapping.items()})


def expand_property_types(frame: pd.DataFrame, delimiter: str | None) -> pd.DataFrame:
    """One row per property-type value; a blank tag still counts as one delivery."""
    if not delimiter or "property_type" not in frame.columns:
        return frame
    expanded = frame.assign(property_type=frame["property_type"].str.split(delimiter, regex=False)).explode("property_type")
    tags = expanded["property_type"].str.strip()
    expanded = expanded.assign(property_type=tags.where(tags != "", pd.NA))
    # Drop blanks left by stray delimiters, keeping one row where every tag was blank.
    blank = expanded["property_type"].isna()
    all_blank = blank.groupby(level=0).transform("all")
    keep = ~blank | (all_blank & ~expanded.index.duplicated(keep="first"))
    return expanded[keep.to_numpy()].reset_index(drop=True)


def load_site_frame(site_cfg: dict, raw_dir: Path) -> pd.DataFrame:
    frames = []
    for name in site_cfg["inputs"]:
        extract = read_extract(raw_dir / name)
        frames.append(map_columns(extract, site_cfg["columns"], source=name))
    combined = pd.concat(frames, ignore_index=True)
    return expand_property_types(combined, site_cfg.get("property_type_delimiter"))
