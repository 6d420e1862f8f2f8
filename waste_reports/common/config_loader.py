"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from waste_reports.common.errors import ConfigError
from waste_reports.common.fs import read_yaml
from waste_reports.common.schema import (
    validate_access_config,
    validate_export_config,
    validate_store_config,
)

CONFIG_FILES = ("store.yml", "access.yml", "export.yml")


@dataclass(frozen=True)
class ConfigBundle:
    store: dict
    access: dict
    export: dict


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
    loaded = {}
    for filename in CONFIG_FILES:
        overlay_path = None
        if overlay_config_dir is not None:
            overlay_path = overlay_config_dir / filename
        loaded[filename] = _load_yaml_with_overlay(config_dir / filename, overlay_path)

    return ConfigBundle(
        store=validate_store_config(loaded["store.yml"], allow_unknown=allow_unknown),
        access=validate_access_config(loaded["access.yml"], allow_unknown=allow_unknown),
        export=validate_export_config(loaded["export.yml"], allow_unknown=allow_unknown),
    )
