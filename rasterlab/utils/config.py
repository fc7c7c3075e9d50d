"""rasterlab.utils.config – user config path and TOML config loader

The engine itself takes no configuration; these settings only steer the
logging helper and the processor framework used by front ends.
"""

from __future__ import annotations

import copy
import os
import pathlib
import tomllib
from collections.abc import Callable
from functools import lru_cache
from typing import Any, Dict, cast

from rasterlab.exceptions import ConfigurationError

CONFIG_ENV_FILE = "RASTERLAB_CONFIG_FILE"
CONFIG_ENV_DIR = "RASTERLAB_CONFIG_DIR"

DEFAULT_CONFIG_DIR = pathlib.Path.home() / ".config" / "rasterlab"
# Allow overriding the config directory at import time via environment variable
CONFIG_DIR = pathlib.Path(os.getenv(CONFIG_ENV_DIR, str(DEFAULT_CONFIG_DIR))).expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_config_path() -> pathlib.Path:
    """Return config file path honoring environment variables.

    ``$RASTERLAB_CONFIG_FILE`` wins over ``$RASTERLAB_CONFIG_DIR``, which
    wins over ``~/.config/rasterlab/config.toml``.
    """
    env_file = os.getenv(CONFIG_ENV_FILE)
    if env_file:
        return pathlib.Path(env_file).expanduser()
    env_dir = os.getenv(CONFIG_ENV_DIR)
    if env_dir:
        return pathlib.Path(env_dir).expanduser() / "config.toml"
    return CONFIG_FILE


DEFAULTS: Dict[str, Any] = {
    "logging": {"level": "INFO"},
    "preview": {"split_percent": 50},
    "histogram": {"canvas_background": "white"},
}


def _is_log_level(value: str) -> str | None:
    if value.upper() not in VALID_LOG_LEVELS:
        return f"must be one of {', '.join(VALID_LOG_LEVELS)}"
    return None


def _is_percent(value: int) -> str | None:
    if not 0 <= value <= 100:
        return "must be within [0, 100]"
    return None


def _is_non_empty(value: str) -> str | None:
    return None if value.strip() else "must not be empty"


# section -> key -> (expected type, extra check returning a problem or None)
EXPECTED_SCHEMA: Dict[str, Dict[str, tuple[type, Callable[[Any], str | None]]]] = {
    "logging": {"level": (str, _is_log_level)},
    "preview": {"split_percent": (int, _is_percent)},
    "histogram": {"canvas_background": (str, _is_non_empty)},
}


def _check_value(section: str, key: str, value: Any) -> str | None:
    expected, check = EXPECTED_SCHEMA[section][key]
    # bool is an int subclass; reject it where an int is expected
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        return f"'{section}.{key}' must be {expected.__name__}"
    problem = check(value)
    return f"'{section}.{key}' {problem}" if problem else None


def _validate_config(data: Dict[str, Any]) -> None:
    """Fill missing keys from DEFAULTS and raise on every invalid value at once."""
    errors: list[str] = []
    for section, keys in EXPECTED_SCHEMA.items():
        table = data.get(section)
        if not isinstance(table, dict):
            errors.append(f"section '{section}' must be a table")
            continue
        for key in keys:
            if key not in table:
                table[key] = DEFAULTS[section][key]
                continue
            problem = _check_value(section, key, table[key])
            if problem:
                errors.append(problem)

    if errors:
        raise ConfigurationError("Invalid configuration: " + "; ".join(errors))


def _merge(base: Dict[str, Any], loaded: Dict[str, Any]) -> None:
    for key, value in loaded.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            base[key].update(value)
        else:
            base[key] = value


@lru_cache(maxsize=1)
def _load_config() -> Dict[str, Any]:
    """Load configuration from TOML and validate."""
    data: Dict[str, Any] = copy.deepcopy(DEFAULTS)

    cfg_path = get_config_path()
    if cfg_path.exists():
        with cfg_path.open("rb") as fp:
            try:
                _merge(data, tomllib.load(fp))
            except tomllib.TOMLDecodeError as exc:
                raise ConfigurationError(f"Invalid TOML in {cfg_path}: {exc}") from exc

    _validate_config(data)
    return data


# public helpers -----------------------------------------------------------


def reload_config() -> Dict[str, Any]:
    """Drop the cached configuration and read the file again."""
    _load_config.cache_clear()
    return get_config()


def get_config() -> Dict[str, Any]:
    """Return a copy of the full validated configuration."""
    return copy.deepcopy(_load_config())


def get_logging_level() -> str:
    return cast(str, _load_config()["logging"]["level"]).upper()


def get_default_split_percent() -> int:
    """Split position used by preview processors when none is given."""
    return cast(int, _load_config()["preview"]["split_percent"])


def get_histogram_background() -> str:
    """Canvas color for histogram renderings, any Pillow color string."""
    return cast(str, _load_config()["histogram"]["canvas_background"])


def get_project_root() -> pathlib.Path:
    """
    Returns the root directory of the package.
    Assumes this config.py file is located one level below it (rasterlab/utils/).
    """
    return pathlib.Path(__file__).resolve().parent.parent
