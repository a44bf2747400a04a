"""
================================================================================
Base Page Object
================================================================================

Common ground for the suite's page objects.

Provides:
    - Navigation relative to the configured base URL
    - A CommonEvents facade bound to the page
    - Workflow error wrapping with step context
    - Failure capture for reports

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import allure
from loguru import logger
from playwright.async_api import Page

from .common_events import CommonEvents
from .config_loader import get_config
from .errors import TestDataError, WorkflowError


class BasePage:
    """
    Base class for all page objects.

    Usage:
        class LoginPage(BasePage):
            URL_PATH = "/"

            async def perform_login(self):
                async with self.workflow("Login"):
                    await self.events.send_keys(self.locators.username_input, "admin")
                    ...
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        timeout: Optional[int] = None,
    ):
        """
        Args:
            page: Playwright Page object
            base_url: Base URL for the application (``ui.base_url``)
            timeout: Page-level wait bound in milliseconds (``ui.page_timeout``)
        """
        self.page = page
        if not base_url:
            base_url = get_config("ui.base_url", "http://localhost:8080")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else get_config("ui.page_timeout", 30000)
        self.events = CommonEvents(page)

    @property
    def url(self) -> str:
        """Absolute URL of this page."""
        return f"{self.base_url}{self.URL_PATH}"

    async def navigate(self, wait_for: str = "load") -> None:
        """
        Open this page and wait for the given load state.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        with allure.step(f"Navigate to {self.URL_PATH}"):
            await self.page.goto(self.url, wait_until=wait_for)
            logger.debug(f"Navigated to: {self.url}")

    @asynccontextmanager
    async def workflow(self, step: str) -> AsyncIterator[None]:
        """
        Run a business step, wrapping any failure in WorkflowError.

        Missing test data propagates unwrapped so callers see a key error.
        """
        with allure.step(step):
            logger.info(f"▶ {step}")
            try:
                yield
            except (WorkflowError, TestDataError):
                raise
            except Exception as e:
                logger.error(f"❌ {step} failed: {e}")
                raise WorkflowError(step, str(e)) from e
            logger.info(f"✅ {step}")

    async def capture_failure(self, test_name: str, directory: Optional[Path] = None) -> Path:
        """
        Save a failure screenshot and attach the current URL to the report.

        Non-critical failures collected during the test are logged as well.
        """
        with allure.step("Capture failure details"):
            path = await self.events.take_screenshot(f"failure_{test_name}", directory)
            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )
            for failure in self.events.non_critical_failures:
                logger.warning(f"Non-critical during test: {failure}")
        return path


__all__ = [
    "BasePage",
    "PageBase",
]

# Page objects in this suite import it as PageBase
PageBase = BasePage
