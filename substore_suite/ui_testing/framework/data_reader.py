"""
================================================================================
Fixture Data Reader
================================================================================

Loads JSON fixture files (credentials, expected values) by file name from the
suite's data directory and resolves dotted keys inside them.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from loguru import logger

from .config_loader import get_config
from .errors import TestDataError


PACKAGE_ROOT = Path(__file__).parent.parent.parent


def data_dir() -> Path:
    """Resolve the fixture directory from `ui.data_dir`."""
    configured = Path(get_config("ui.data_dir", "ui_testing/data"))
    if configured.is_absolute():
        return configured
    return PACKAGE_ROOT / configured


def load_json(file_name: Union[str, Path], directory: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load a JSON fixture file.

    Args:
        file_name: File name relative to the data directory, or an absolute path
        directory: Overrides the configured data directory

    Returns:
        Parsed JSON document

    Raises:
        TestDataError: File is missing or is not valid JSON
    """
    path = Path(file_name)
    if not path.is_absolute():
        path = (directory or data_dir()) / path

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise TestDataError(f"Test data file not found: {path}", key=str(file_name)) from e
    except json.JSONDecodeError as e:
        raise TestDataError(f"Invalid JSON in test data file {path}: {e}", key=str(file_name)) from e

    logger.debug(f"Loaded test data from: {path}")
    return data


def get_value(data: Mapping[str, Any], key: str) -> Any:
    """
    Resolve a dotted key such as ``ValidLogin.Username``.

    Raises:
        TestDataError: Any segment of the path is missing
    """
    value: Any = data
    for part in key.split("."):
        if not isinstance(value, Mapping) or part not in value:
            raise TestDataError(f"Test data key not found: '{key}'", key=key)
        value = value[part]
    return value


def require_keys(data: Mapping[str, Any], keys: Iterable[str], context: str = "expected data") -> None:
    """
    Check that every key is present before any UI interaction starts.

    Raises:
        TestDataError: Naming the first missing key
    """
    for key in keys:
        if key not in data:
            raise TestDataError(f"Missing key '{key}' in {context}", key=key)


__all__ = [
    "data_dir",
    "load_json",
    "get_value",
    "require_keys",
]
