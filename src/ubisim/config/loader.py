# src/ubisim/config/loader.py
"""YAML loading and layered merging of run configuration."""

from __future__ import annotations

from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

# noinspection PyPackageRequirements
import yaml


def read_yaml(obj: str | Path | Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a plain dict – {} if *obj* is None."""
    if obj is None:
        return {}
    if isinstance(obj, Mapping):
        return dict(obj)
    p = Path(obj)
    with p.open("rt", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, Mapping):
        raise TypeError(f"config root must be mapping, got {type(data)!r}")
    return dict(data)


def package_defaults() -> dict[str, Any]:
    """Load ubisim/defaults.yml"""
    txt = resources.files("ubisim").joinpath("defaults.yml").read_text()
    return yaml.safe_load(txt) or {}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge *override* into a copy of *base*.

    Nested mappings merge key by key; lists and scalars are replaced whole.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def merged_config(
    config: str | Path | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """
    Layer the configuration sources.

    Order of precedence (later overrides earlier):

        1. package defaults  (ubisim/defaults.yml)
        2. *config*  (Path / str / Mapping / None)
        3. explicit keyword arguments (**overrides)
    """
    cfg = deep_merge(package_defaults(), read_yaml(config))
    return deep_merge(cfg, overrides)
