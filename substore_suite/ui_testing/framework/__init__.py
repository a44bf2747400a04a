"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based UI automation framework for the Substore suite.

Components:
    - common_events: Timeout-bounded element operations over a page
    - targets: Locator / element-handle variant accepted by every operation
    - errors: NotFound / Timeout / Stale / Verification / Screenshot errors
    - page_base: Base page object with workflow error wrapping
    - browser_manager: Browser lifecycle management
    - config_loader, log_config, data_reader: configuration, logging, fixtures

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .common_events import CommonEvents
from .config_loader import ConfigLoader, ConfigurationError, get_config
from .errors import (
    ElementNotFoundError,
    ScreenshotError,
    StaleElementError,
    TestDataError,
    UIActionError,
    VerificationError,
    WaitTimeoutError,
    WorkflowError,
)
from .page_base import BasePage, PageBase
from .targets import ByHandle, ByLocator, Target, as_target

__all__ = [
    "BrowserManager",
    "CommonEvents",
    "ConfigLoader",
    "ConfigurationError",
    "get_config",
    "ElementNotFoundError",
    "ScreenshotError",
    "StaleElementError",
    "TestDataError",
    "UIActionError",
    "VerificationError",
    "WaitTimeoutError",
    "WorkflowError",
    "BasePage",
    "PageBase",
    "ByHandle",
    "ByLocator",
    "Target",
    "as_target",
]
