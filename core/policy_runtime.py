"""Configuration loading and logging bootstrap."""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "RUNCMD_CONFIG"

DEFAULT_CONFIG: dict[str, Any] = {
    "runner": {
        "verbose": False,
        "shell": False,
        "shell_executable": None,
    },
    "logging": {
        "level": "WARNING",
    },
}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_effective_config(path: Path | None = None) -> dict[str, Any]:
    """Merge a user config file over the built-in defaults.

    Without an explicit path, the file named by RUNCMD_CONFIG is used if set.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        path = Path(env_path) if env_path else None
    user_cfg = load_yaml(path) if path is not None else {}
    return merge_dicts(copy.deepcopy(DEFAULT_CONFIG), user_cfg)


def configure_logging(config: dict[str, Any]) -> None:
    """Apply the configured root log level."""
    level_name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
