from pathlib import Path

import pandas as pd
import pytest

from delivery_pace.common.columns import clean_name, clean_names
from delivery_pace.common.errors import SourceSchemaError, StageError
from delivery_pace.pipeline.ingest import expand_property_types, load_site_frame, map_columns, read_extract


def test_clean_names_produces_snake_case_and_dedupes():
    headers = ["Mobile User A Username", "DeliveredOn", "Distance (m)", "Distance (m)", "2nd visit"]
    assert clean_names(headers) == [
        "mobile_user_a_username",
        "delivered_on",
        "distance_m",
        "distance_m_2",
        "x2nd_visit",
    ]


def test_clean_name_handles_already_clean_and_camel_case():
    assert clean_name("user_name") == "user_name"
    assert clean_name("enteredBy") == "entered_by"
    assert clean_name("  Full Name ") == "full_name"


def test_clean_name_splits_acronym_before_capitalised_word():
    assert clean_name("GPSAccuracy") == "gps_accuracy"
    assert clean_name("EnumeratorID") == "enumerator_id"


def test_map_columns_renames_to_canonical_names():
    frame = pd.DataFrame({"full_name": ["a"], "delivered_on": ["2025-01-06"], "distance": ["3"], "extra": ["x"]})

    mapped = map_columns(frame, {"enumerator": "full_name", "delivered_on": "delivered_on", "distance": "distance"})

    assert list(mapped.columns) == ["enumerator", "delivered_on", "distance"]


def test_map_columns_rejects_missing_source_column():
    frame = pd.DataFrame({"user_name": ["a"]})
    with pytest.raises(SourceSchemaError):
        map_columns(frame, {"enumerator": "full_name"}, source="kcc_2024.xlsx")


def test_expand_property_types_yields_one_row_per_tag():
    frame = pd.DataFrame(
        {
            "enumerator": ["a", "b", "c", "d"],
            "property_type": ["Residential, Commercial", None, "Shop,", ","],
        }
    )

    expanded = expand_property_types(frame, ",")

    assert expanded["enumerator"].tolist() == ["a", "a", "b", "c", "d"]
    assert expanded["property_type"].dropna().tolist() == ["Residential", "Commercial", "Shop"]


def test_expand_property_types_treats_delimiter_literally():
    frame = pd.DataFrame({"enumerator": ["a", "b"], "property_type": ["Residential House | Shop", "Market Stall"]})

    expanded = expand_property_types(frame, " | ")

    assert expanded["enumerator"].tolist() == ["a", "a", "b"]
    assert expanded["property_type"].tolist() == ["Residential House", "Shop", "Market Stall"]


def test_expand_property_types_is_noop_without_delimiter():
    frame = pd.DataFrame({"enumerator": ["a"], "property_type": ["x,y"]})
    assert expand_property_types(frame, None) is frame


def _site_cfg(inputs: list[str]) -> dict:
    return {
        "site": {"key": "freetown_2023", "city": "Freetown", "year": 2023},
        "inputs": inputs,
        "columns": {
            "enumerator": "enteredby",
            "delivered_on": "delivered_on",
            "distance": "distance",
            "property_type": "property_type",
        },
        "distance_unit": "m",
        "date_formats": ["%d/%m/%Y %H:%M"],
        "property_type_delimiter": ";",
    }


def test_load_site_frame_concatenates_team_extracts(tmp_path: Path):
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "team_1-3.csv").write_text(
        "enteredby,Delivered On,Distance,Property Type\n"
        "amina,06/01/2023 09:10,12.5,Residential;Shop\n",
        encoding="utf-8",
    )
    pd.DataFrame(
        {
            "enteredby": ["bockarie"],
            "Delivered On": ["06/01/2023 10:30"],
            "Distance": ["95"],
            "Property Type": ["Residential"],
        }
    ).to_excel(raw / "team_4-6.xlsx", index=False)

    frame = load_site_frame(_site_cfg(["team_1-3.csv", "team_4-6.xlsx"]), raw)

    assert frame["enumerator"].tolist() == ["amina", "amina", "bockarie"]
    assert frame["property_type"].tolist() == ["Residential", "Shop", "Residential"]
    assert frame["distance"].tolist() == ["12.5", "12.5", "95"]


def test_read_extract_missing_file_raises(tmp_path: Path):
    with pytest.raises(StageError):
        read_extract(tmp_path / "absent.csv")


def test_read_extract_rejects_unknown_format(tmp_path: Path):
    path = tmp_path / "extract.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(StageError):
        read_extract(path)
