"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from delivery_pace.common.errors import ConfigError
from delivery_pace.common.fs import read_yaml
from delivery_pace.common.schema import validate_pipeline_config, validate_site_config


@dataclass(frozen=True)
class ConfigBundle:
    sites: dict[str, dict]
    pipeline: dict


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if not isinstance(base, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must contain a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_all_configs(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> ConfigBundle:
    site_files = sorted((config_dir / "sites").glob("*.yml"))
    if not site_files:
        raise ConfigError(f"No site configs found under {config_dir / 'sites'}")

    sites: dict[str, dict] = {}
    for path in site_files:
        overlay_path = None
        if overlay_config_dir is not None:
            overlay_path = overlay_config_dir / "sites" / path.name
        cfg = validate_site_config(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)
        key = cfg["site"]["key"]
        if key != path.stem:
            raise ConfigError(f"site.key {key!r} does not match file name {path.name}")
        sites[key] = cfg

    pipeline = validate_pipeline_config(
        _load_yaml_with_overlay(
            config_dir / "pipeline.yml",
            (overlay_config_dir / "pipeline.yml") if overlay_config_dir is not None else None,
        )
    )
    return ConfigBundle(sites=sites, pipeline=pipeline)


def resolve_sites(target: str, bundle: ConfigBundle) -> list[str]:
    if target == "all":
        return sorted(bundle.sites)
    if target not in bundle.sites:
        known = ", ".join(sorted(bundle.sites))
        raise ConfigError(f"Unknown site {target!r}; expected one of: {known}")
    return [target]
