"""
================================================================================
Configuration Loader
================================================================================

Settings for the UI suites come from config/config.yaml, and any leaf can be
overridden from the environment by its upper-cased dotted path:

    ui.base_url                  -> UI_BASE_URL
    ui.timeouts.filter_ms        -> UI_TIMEOUTS_FILTER_MS
    logging.level                -> LOGGING_LEVEL

Environment values arrive as strings and are coerced to the type of the
caller's default. CONFIG_PATH points the loader at another YAML file.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "config.yaml"

_TRUTHY = frozenset({"true", "1", "yes", "on"})


class ConfigurationError(Exception):
    """Raised when the configuration file cannot be parsed."""


def env_key(path: str) -> str:
    """Environment variable overriding a dotted config path."""
    return path.upper().replace(".", "_")


def _coerce(raw: str, default: Any) -> Any:
    # bool before int: bool is an int subclass
    if isinstance(default, bool):
        return raw.strip().lower() in _TRUTHY
    for kind in (int, float):
        if isinstance(default, kind):
            try:
                return kind(raw)
            except ValueError:
                logger.warning(f"Cannot read {raw!r} as {kind.__name__}; using the raw string")
                return raw
    return raw


def _read_yaml(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        logger.warning(f"No configuration at {path}; defaults and environment only")
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    logger.debug(f"Configuration read from {path}")
    return data or {}


class ConfigLoader:
    """
    Process-wide view of the suite configuration.

    Lookup order for `get(path, default)`:
        1. environment variable `env_key(path)`, coerced to type(default)
        2. the YAML value at `path`
        3. `default`

    Usage:
        >>> ConfigLoader().get("ui.timeouts.search_url_ms", 15000)
        15000
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance.path = Path(config_path or os.environ.get("CONFIG_PATH") or DEFAULT_CONFIG_PATH)
            instance.data = _read_yaml(instance.path)
            cls._instance = instance
        return cls._instance

    def get(self, path: str, default: Any = None) -> Any:
        raw = os.environ.get(env_key(path))
        if raw is not None:
            return _coerce(raw, default)

        node: Any = self.data
        for part in path.split("."):
            if not isinstance(node, Mapping) or node.get(part) is None:
                return default
            node = node[part]
        return node

    def reload(self) -> None:
        """Re-read the YAML file this loader was created with."""
        self.data = _read_yaml(self.path)
        logger.info(f"Configuration reloaded from {self.path}")

    @classmethod
    def reset(cls) -> None:
        """Forget the shared instance so the next ConfigLoader() reads afresh."""
        cls._instance = None


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "env_key",
]
