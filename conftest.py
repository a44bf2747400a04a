"""
Repository-level pytest configuration.

Why this exists:
  - Put the repo root on sys.path so `substore_suite` imports resolve
  - Configure Loguru once for the whole run
  - Keep behavior explicit and discoverable

Important:
  Credentials live in `substore_suite/ui_testing/data/LoginData.json` and
  environment-specific URLs in `substore_suite/config/config.yaml` (or
  environment variables such as UI_BASE_URL).
"""

from __future__ import annotations

from pathlib import Path

import pytest

from substore_suite.ui_testing.framework.log_config import init_logger


def pytest_configure(config):
    """Initialize logging before collection starts."""
    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
