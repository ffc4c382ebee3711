from pathlib import Path

import pytest

from delivery_pace.cli import parse_args, run_command

SITE_YAML = """site:
  key: kenema_2024
  city: Kenema
  year: 2024
inputs:
  - kcc_2024.csv
columns:
  enumerator: user_name
  delivered_on: delivered_on
  distance: distance
  property_type: property_type
distance_unit: km
date_formats:
  - "%d/%m/%Y %H:%M:%S"
  - "%m/%d/%Y %H:%M:%S"
property_type_delimiter: ","
"""

PIPELINE_YAML = """accuracy:
  threshold_meters: 80
outliers:
  iqr_multiplier: 1.5
summary:
  percentiles: [80, 90]
daily_pace:
  rounding: none
output:
  benchmarks_filename: benchmarks.csv
  comparisons_filename: comparisons.csv
"""


def _write_inputs(root: Path) -> tuple[Path, Path]:
    config_dir = root / "config"
    (config_dir / "sites").mkdir(parents=True)
    (config_dir / "pipeline.yml").write_text(PIPELINE_YAML, encoding="utf-8")
    (config_dir / "sites" / "kenema_2024.yml").write_text(SITE_YAML, encoding="utf-8")

    data_dir = root / "data"
    (data_dir / "raw").mkdir(parents=True)
    lines = ["user_name,delivered_on,distance,property_type"]
    for day in range(2, 12):
        for enumerator in ("aminata", "foday", "musu"):
            for i in range((day * 7 + len(enumerator)) % 9 + 3):
                distance = "0.08" if i % 4 else "0.3"
                tags = '"Residential,Commercial"' if i % 5 == 0 else "Residential"
                lines.append(f"{enumerator},{day:02d}/09/2024 {6 + i % 12:02d}:{i:02d}:00,{distance},{tags}")
    lines.append("musu,09/13/2024 10:00:00,0.01,Residential")
    (data_dir / "raw" / "kcc_2024.csv").write_text("\n".join(lines) + "\n", encoding="utf-8")
    return config_dir, data_dir


def _run_once(root: Path, run_id: str) -> Path:
    config_dir, data_dir = _write_inputs(root)
    args = parse_args(
        [
            "all",
            "--config-dir",
            str(config_dir),
            "--data-dir",
            str(data_dir),
            "--run-date",
            "2025-06-01",
            "--run-id",
            run_id,
        ]
    )
    assert run_command(args) == 0
    return data_dir


@pytest.mark.regression
def test_outputs_are_byte_stable_for_same_inputs(tmp_path: Path):
    first = _run_once(tmp_path / "first", "run-a")
    second = _run_once(tmp_path / "second", "run-b")

    stable_outputs = [
        Path("out") / "benchmarks.csv",
        Path("out") / "comparisons.csv",
        Path("out") / "kenema_2024" / "daily_pace_all.csv",
        Path("out") / "kenema_2024" / "daily_pace_accurate.csv",
        Path("out") / "kenema_2024" / "temporal" / "all_by_day_and_time.csv",
        Path("out") / "kenema_2024" / "temporal" / "accurate_by_day_of_week.csv",
        Path("intermediate") / "kenema_2024_records.csv",
    ]
    for relative in stable_outputs:
        assert (first / relative).read_bytes() == (second / relative).read_bytes(), relative
