"""YAML config loader with environment override and runtime get/set."""

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from skyview.config.defaults import API_KEY_ENV
from skyview.config.schema import AppConfig

logger = logging.getLogger(__name__)


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing or empty file yields the defaults. ``SKYVIEW_API_KEY`` in the
    environment takes precedence over ``api.api_key``.
    """
    raw: dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            logger.info("Config file %s not found, using defaults", path)

    env_key = os.environ.get(API_KEY_ENV, "").strip()
    if env_key:
        raw["api"] = raw.get("api") or {}
        raw["api"]["api_key"] = env_key

    return AppConfig(**raw)


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'refresh.staleness_minutes'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: AppConfig, dotted_key: str, value: Any) -> AppConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new AppConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target.get(parts[-1])
    if isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    target[parts[-1]] = value
    return AppConfig(**data)


def save_config(config: AppConfig, path: str | Path) -> None:
    """Write the config back to YAML.

    A key that came from the environment is not written to disk.
    """
    data = json.loads(config.model_dump_json())
    if data["api"]["api_key"] and data["api"]["api_key"] == os.environ.get(API_KEY_ENV, "").strip():
        data["api"]["api_key"] = ""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)
