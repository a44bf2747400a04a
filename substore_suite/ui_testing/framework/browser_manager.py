"""
================================================================================
Browser Manager
================================================================================

Owns the Playwright driver and one browser for the duration of a test.

Every page is opened in its own context, so cookies and storage never leak
between tests, and every context gets the suite's default action timeout.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from .config_loader import get_config


SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

# The hospital application is usually served with a self-signed certificate
CONTEXT_DEFAULTS: Dict[str, Any] = {
    "viewport": {"width": 1920, "height": 1080},
    "ignore_https_errors": True,
}


class BrowserManager:
    """
    Async context manager around one browser instance.

    Usage:
        async with BrowserManager(browser_type="firefox") as manager:
            page = await manager.new_page()
            await LoginPage(page).open()
    """

    def __init__(
        self,
        headless: Optional[bool] = None,
        browser_type: Optional[str] = None,
        default_timeout: Optional[int] = None,
    ):
        """
        Args:
            headless: Hide the browser window (``ui.headless``)
            browser_type: One of SUPPORTED_BROWSERS (``ui.browser``)
            default_timeout: Action timeout in ms for every context (``ui.default_timeout``)

        Raises:
            ValueError: Unknown browser type
        """
        browser_type = (browser_type or get_config("ui.browser", "chromium")).lower()
        if browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{browser_type}', expected one of {', '.join(SUPPORTED_BROWSERS)}"
            )

        self.browser_type = browser_type
        self.headless = get_config("ui.headless", True) if headless is None else headless
        self.default_timeout = (
            default_timeout if default_timeout is not None else get_config("ui.default_timeout", 10000)
        )

        self._driver: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    async def __aenter__(self) -> "BrowserManager":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser

    def _launch_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"headless": self.headless}
        if self.browser_type == "chromium":
            options["args"] = ["--ignore-certificate-errors", "--start-maximized"]
        return options

    async def start(self) -> None:
        """Start the driver and launch the configured browser."""
        if self._browser is not None:
            return
        self._driver = await async_playwright().start()
        launcher = getattr(self._driver, self.browser_type)
        self._browser = await launcher.launch(**self._launch_options())
        logger.info(f"Launched {self.browser_type} (headless={self.headless})")

    async def close(self) -> None:
        """Close every context, then the browser and the driver."""
        while self._contexts:
            context = self._contexts.pop()
            try:
                await context.close()
            except PlaywrightError as e:
                logger.warning(f"Browser context did not close cleanly: {e}")

        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._driver is not None:
            await self._driver.stop()
            self._driver = None
        logger.debug(f"{self.browser_type} closed")

    async def new_context(self, **options: Any) -> BrowserContext:
        """
        Open an isolated context.

        Keyword options are merged over CONTEXT_DEFAULTS and passed to
        ``Browser.new_context``.
        """
        if self._browser is None:
            raise RuntimeError("Browser not started; use 'async with BrowserManager()' or call start()")

        context = await self._browser.new_context(**{**CONTEXT_DEFAULTS, **options})
        context.set_default_timeout(self.default_timeout)
        self._contexts.append(context)
        return context

    async def new_page(self, context: Optional[BrowserContext] = None, **context_options: Any) -> Page:
        """Open a page, in a fresh context unless one is given."""
        if context is None:
            context = await self.new_context(**context_options)
        return await context.new_page()


__all__ = [
    "BrowserManager",
    "SUPPORTED_BROWSERS",
]
