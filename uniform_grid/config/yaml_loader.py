"""Grid defaults read from defaults.yaml.

GridConfig.from_dict() and warn_if_unsafe() fill missing values from here, so
editing the YAML file (or pointing UNIFORM_GRID_DEFAULTS_PATH at another one)
changes the defaults without touching defaults.py. Only PyYAML is imported,
which keeps this module free of circular imports within the package.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

DEFAULTS_PATH_ENV = "UNIFORM_GRID_DEFAULTS_PATH"
_PACKAGED_DEFAULTS = Path(__file__).with_name("defaults.yaml")


@lru_cache(maxsize=1)
def _defaults() -> dict[str, Any]:
    override = os.getenv(DEFAULTS_PATH_ENV)
    path = Path(override) if override else _PACKAGED_DEFAULTS
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Grid defaults in {path} must be a mapping")
    return data


def get_defaults() -> dict[str, Any]:
    """All sections of the defaults file (shallow copy)."""
    return dict(_defaults())


def get_default(key_path: str, default: Any = None) -> Any:
    """Look up a dotted key such as 'grid.lower_bound'.

    Missing keys and null values give `default`:

        >>> get_default('sampling.seed', 42)
        42
    """
    value: Any = _defaults()
    for key in key_path.split("."):
        value = value.get(key) if isinstance(value, dict) else None
        if value is None:
            return default
    return value


def reload_defaults() -> None:
    """Forget the cached file so the next lookup reads it again."""
    _defaults.cache_clear()
