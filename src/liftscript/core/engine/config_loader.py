"""
YAML -> settings loader.

Loads user-tunable settings from defaults.yaml (bundled with the package)
and merges user overrides from ~/.liftscript/config.yaml.

Usage:
    from liftscript.core.engine.config_loader import load_settings
    settings = load_settings()
    unit = settings.distance_unit

If the user override file exists but cannot be read or parsed, a warning
is logged and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import DEFAULT_DISTANCE_UNIT, DEFAULT_WEIGHT_UNIT, DISTANCE_UNITS, SHARE_TABLE

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "LIFTSCRIPT_HOME"
USER_CONFIG_NAME = "config.yaml"


@dataclass(frozen=True)
class Settings:
    """Resolved user settings."""

    weight_unit: str = DEFAULT_WEIGHT_UNIT
    distance_unit: str = DEFAULT_DISTANCE_UNIT
    notifications: bool = True
    share_backend: str = "local"
    share_table: str = SHARE_TABLE


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _section(config: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a config section, or {} when it is missing or not a mapping."""
    value = config.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        logger.warning("Config section %r should be a mapping, got %r; using defaults", key, value)
        return {}
    return value


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; log and return {} on any error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", path)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_data_dir() -> Path:
    """Return $LIFTSCRIPT_HOME, or ~/.liftscript when unset."""
    env = os.environ.get(HOME_ENV_VAR)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".liftscript"


def load_bundled_config() -> dict[str, Any]:
    """Return the bundled defaults.yaml as a dict."""
    ref = importlib.resources.files("liftscript").joinpath("defaults.yaml")
    data = yaml.safe_load(ref.read_text(encoding="utf-8"))
    return data if isinstance(data, dict) else {}


def load_config(data_dir: Path | None = None) -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/liftscript/defaults.yaml
    2. User override at <data dir>/config.yaml

    Returns:
        Merged dict of config sections
    """
    config = load_bundled_config()
    user = (data_dir or get_data_dir()) / USER_CONFIG_NAME
    if user.exists():
        config = _deep_merge(config, _load_yaml_file(user))
    return config


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Build Settings from a merged config dict, dropping invalid values."""
    units = _section(config, "units")
    session = _section(config, "session")
    share = _section(config, "share")
    defaults = Settings()

    distance_unit = str(units.get("distance", defaults.distance_unit))
    if distance_unit not in DISTANCE_UNITS:
        logger.warning("Unknown distance unit %r; using %s", distance_unit, defaults.distance_unit)
        distance_unit = defaults.distance_unit

    backend = str(share.get("backend", defaults.share_backend))
    if backend not in ("local", "supabase"):
        logger.warning("Unknown share backend %r; using %s", backend, defaults.share_backend)
        backend = defaults.share_backend

    return Settings(
        weight_unit=str(units.get("weight", defaults.weight_unit)),
        distance_unit=distance_unit,
        notifications=bool(session.get("notifications", defaults.notifications)),
        share_backend=backend,
        share_table=str(share.get("table", defaults.share_table)),
    )


def load_settings(data_dir: Path | None = None) -> Settings:
    """Load settings for the given (or default) data directory."""
    return settings_from_config(load_config(data_dir))
