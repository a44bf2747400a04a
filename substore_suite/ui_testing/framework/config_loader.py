"""
================================================================================
Suite Configuration
================================================================================

Settings for the UI suite live in `substore_suite/config/config.yaml`.
Any key can be overridden from the environment by upper-casing its dotted
path: `ui.base_url` becomes `UI_BASE_URL`, `substore.requisition.quantity`
becomes `SUBSTORE_REQUISITION_QUANTITY`. Overrides are coerced to the type
of the default passed by the caller.

`UI_CONFIG_FILE` points the loader at a different YAML file.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "config.yaml"
CONFIG_FILE_ENV = "UI_CONFIG_FILE"

_TRUTHY = ("true", "1", "yes", "on")


class ConfigurationError(Exception):
    """The configuration file exists but cannot be parsed."""
    pass


def env_key_for(key: str) -> str:
    """Environment variable that overrides a dotted key."""
    return key.upper().replace(".", "_")


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


def _coerce(raw: str, like: Any) -> Any:
    """Coerce an environment string to the type of ``like``; keep it on failure."""
    # bool before int: bool is an int subclass
    converters: Dict[type, Callable[[str], Any]] = {bool: _to_bool, int: int, float: float}
    for kind, convert in converters.items():
        if isinstance(like, kind):
            try:
                return convert(raw)
            except ValueError:
                logger.warning(f"Cannot read '{raw}' as {kind.__name__}, keeping the string")
                return raw
    return raw


def _walk(tree: Dict[str, Any], key: str) -> Any:
    node: Any = tree
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


class ConfigLoader:
    """
    Process-wide configuration, loaded once.

    Lookup order for ``get("ui.base_url", default)``:
        1. ``UI_BASE_URL`` in the environment
        2. ``ui.base_url`` in the YAML file
        3. ``default``

    Example:
        >>> ConfigLoader().get("ui.page_timeout", 30000)
        30000
    """

    _instance: Optional["ConfigLoader"] = None

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._ready = False
            cls._instance = instance
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Args:
            config_path: YAML file to read; falls back to ``UI_CONFIG_FILE``
                and then to the bundled ``config.yaml``. Ignored once the
                singleton is loaded.
        """
        if self._ready:
            return
        chosen = config_path or os.environ.get(CONFIG_FILE_ENV) or DEFAULT_CONFIG_PATH
        self._config_path = Path(chosen)
        self._data: Dict[str, Any] = {}
        self._read()
        self._ready = True

    def _read(self) -> None:
        if not self._config_path.is_file():
            logger.warning(f"No config file at {self._config_path}, relying on defaults and environment")
            self._data = {}
            return

        try:
            raw = self._config_path.read_text(encoding="utf-8")
            loaded = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {self._config_path}: {e}") from e

        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(
                f"{self._config_path} must contain a mapping, got {type(loaded).__name__}"
            )
        self._data = loaded or {}
        logger.debug(f"Config loaded: {self._config_path}")

    @property
    def config_path(self) -> Path:
        return self._config_path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Resolve a dotted key.

        Args:
            key: Dotted path such as ``ui.default_timeout``
            default: Returned when neither environment nor file sets the key;
                also decides the type of an environment override

        Returns:
            The resolved value
        """
        override = os.environ.get(env_key_for(key))
        if override is not None:
            return _coerce(override, default)

        value = _walk(self._data, key)
        return default if value is None else value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Top-level mapping for ``section``; empty when absent."""
        value = self._data.get(section)
        return dict(value) if isinstance(value, dict) else {}

    def reload(self) -> None:
        """Re-read the file, e.g. after a test rewrote it."""
        self._read()
        logger.info(f"Config reloaded: {self._config_path}")

    @classmethod
    def reset(cls) -> None:
        """Forget the loaded instance so the next call re-reads the file."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ``ConfigLoader().get(key, default)``."""
    return ConfigLoader().get(key, default)


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "get_config",
    "env_key_for",
]
