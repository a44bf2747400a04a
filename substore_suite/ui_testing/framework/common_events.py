# ================================================================================
# Common Events Module
# ================================================================================
#
# Timeout-bounded interaction primitives over a Playwright page, so page
# objects never deal with raw polling or raw Playwright errors.
#
# Key Features:
#   - One method per action, accepting a selector or an element handle
#   - Explicit waits for visibility, actionability and URL changes
#   - Script-executed clicks for covered or animated elements
#   - Playwright errors translated into NotFound / Timeout / Stale errors
#   - Best-effort highlighting with a non-critical failure channel
#   - Timestamped screenshots attached to Allure
#
# ================================================================================

from __future__ import annotations

import asyncio
import re
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Union

import allure
from loguru import logger
from playwright.async_api import (
    ElementHandle,
    Error as PlaywrightError,
    Locator,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from .config_loader import get_config
from .errors import (
    ElementNotFoundError,
    ScreenshotError,
    StaleElementError,
    UIActionError,
    WaitTimeoutError,
)
from .targets import ByHandle, ByLocator, Target, as_target


HIGHLIGHT_STYLE = "3px solid red"

_DETACHED_PATTERN = re.compile(r"not attached to the DOM|detached", re.IGNORECASE)


def is_detached_error(error: BaseException) -> bool:
    """True if a Playwright error reports an element that left the DOM."""
    return isinstance(error, PlaywrightError) and bool(_DETACHED_PATTERN.search(str(error)))


class CommonEvents:
    """
    Facade over a Playwright page offering generic element operations.

    Every method accepts a target: a selector string, a ``ByLocator`` /
    ``ByHandle`` or a raw ``ElementHandle``.

    Example:
        events = CommonEvents(page)
        await events.click("xpath=//a[contains(text(),'Inventory')]")
        await events.wait_for_url_contains("Inventory/Stock", 5000)
    """

    def __init__(self, page: Page, timeout: Optional[int] = None):
        """
        Args:
            page: Playwright Page object
            timeout: Default wait bound in milliseconds (``ui.default_timeout``)
        """
        self.page = page
        self.timeout = timeout if timeout is not None else get_config("ui.default_timeout", 10000)
        self.non_critical_failures: List[str] = []

    # =========================================================================
    # Error translation
    # =========================================================================

    def _translate(
        self,
        error: PlaywrightError,
        action: str,
        target: Union[Target, str],
        timeout: Optional[int] = None,
    ) -> UIActionError:
        """Map a Playwright error onto the UI error taxonomy; plain strings describe page-level targets."""
        described = target if isinstance(target, str) else target.describe()
        if isinstance(error, PlaywrightTimeoutError):
            return WaitTimeoutError(
                f"Timed out after {timeout}ms waiting to {action} '{described}'",
                target=described,
                timeout=timeout,
            )
        if is_detached_error(error):
            return StaleElementError(
                f"Element '{described}' went stale before {action}",
                target=described,
                timeout=timeout,
            )
        return UIActionError(
            f"Failed to {action} '{described}': {error.message}",
            target=described,
            timeout=timeout,
        )

    def _bound(self, timeout: Optional[int]) -> int:
        """Per-call timeout or the default; an explicit 0 disables the bound."""
        return self.timeout if timeout is None else timeout

    def _locator(self, selector: str) -> Locator:
        return self.page.locator(selector).first

    async def _resolve(self, target: Target, timeout: Optional[int] = None) -> ElementHandle:
        """Resolve a target to an element handle, waiting for locators."""
        if isinstance(target, ByHandle):
            return target.element
        return await self.find_element(target.selector, timeout=timeout)

    # =========================================================================
    # Lookup
    # =========================================================================

    async def find_element(self, locator: str, timeout: Optional[int] = None) -> ElementHandle:
        """
        Find an element with an explicit wait for it to be attached.

        Args:
            locator: Element selector
            timeout: Wait bound in milliseconds

        Returns:
            The first matching ElementHandle

        Raises:
            ElementNotFoundError: Nothing matched within the bound
        """
        timeout = self._bound(timeout)
        try:
            element = await self.page.wait_for_selector(locator, state="attached", timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(
                f"Element with locator '{locator}' not found within {timeout}ms",
                target=locator,
                timeout=timeout,
            ) from e
        except PlaywrightError as e:
            raise self._translate(e, "find", ByLocator(locator), timeout) from e

        if element is None:
            raise ElementNotFoundError(
                f"Element with locator '{locator}' not found within {timeout}ms",
                target=locator,
                timeout=timeout,
            )
        logger.debug(f"Found element: {locator}")
        return element

    async def get_web_elements(self, locator: str) -> List[ElementHandle]:
        """Return all elements currently matching the locator (possibly none)."""
        try:
            return await self.page.query_selector_all(locator)
        except PlaywrightError as e:
            raise self._translate(e, "query", ByLocator(locator)) from e

    # =========================================================================
    # Visibility and waits
    # =========================================================================

    async def is_displayed(self, target: Union[Target, str, ElementHandle]) -> bool:
        """
        Check whether an element is visible right now.

        Never raises: absent, hidden, stale and missing (None) targets all
        yield False.
        """
        try:
            target = as_target(target)
        except ValueError as e:
            logger.debug(f"Visibility check skipped: {e}")
            return False
        try:
            if isinstance(target, ByLocator):
                return await self._locator(target.selector).is_visible()
            return await target.element.is_visible()
        except PlaywrightError as e:
            if is_detached_error(e):
                logger.debug(f"Element '{target.describe()}' is stale, reporting not displayed")
            else:
                logger.debug(f"Visibility check failed for '{target.describe()}': {e}")
            return False

    async def wait_till_element_visible(
        self,
        target: Union[Target, str, ElementHandle],
        timeout: Optional[int] = None,
    ) -> None:
        """
        Block until the element is visible.

        Raises:
            WaitTimeoutError: Element did not become visible within the bound
            StaleElementError: Handle left the DOM while waiting
        """
        target = as_target(target)
        timeout = self._bound(timeout)
        try:
            if isinstance(target, ByLocator):
                await self._locator(target.selector).wait_for(state="visible", timeout=timeout)
            else:
                await target.element.wait_for_element_state("visible", timeout=timeout)
        except PlaywrightError as e:
            raise self._translate(e, "become visible", target, timeout) from e

    async def wait_for_element_to_be_visible(self, locator: str, timeout: Optional[int] = None) -> None:
        """Block until the element matched by ``locator`` is visible."""
        await self.wait_till_element_visible(ByLocator(locator), timeout)

    async def wait_till_element_interactable(
        self,
        target: Union[Target, str, ElementHandle],
        timeout: Optional[int] = None,
    ) -> None:
        """Block until the element is visible, enabled and no longer animating."""
        target = as_target(target)
        timeout = self._bound(timeout)
        element = await self._resolve(target, timeout)
        try:
            for state in ("visible", "enabled", "stable"):
                await element.wait_for_element_state(state, timeout=timeout)
        except PlaywrightError as e:
            raise self._translate(e, "become interactable", target, timeout) from e

    async def wait_for_url_contains(self, partial_url: str, timeout: Optional[int] = None) -> None:
        """
        Block until the current URL contains ``partial_url``.

        Args:
            partial_url: Substring expected in the URL
            timeout: Wait bound in milliseconds

        Raises:
            WaitTimeoutError: Naming the expected substring
        """
        timeout = self._bound(timeout)
        with allure.step(f"Wait for URL containing: {partial_url}"):
            try:
                await self.page.wait_for_url(lambda url: partial_url in url, timeout=timeout)
            except PlaywrightTimeoutError as e:
                raise WaitTimeoutError(
                    f"Timed out after {timeout}ms waiting for URL to contain: {partial_url} "
                    f"(current URL: {self.page.url})",
                    target=partial_url,
                    timeout=timeout,
                ) from e
            except PlaywrightError as e:
                raise self._translate(e, "wait for URL containing", partial_url, timeout) from e
        logger.debug(f"URL contains '{partial_url}': {self.page.url}")

    async def wait_for_page_load(self, timeout: Optional[int] = None) -> None:
        """Wait until the document reaches the ``load`` state."""
        timeout = self._bound(timeout)
        try:
            await self.page.wait_for_load_state("load", timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(
                f"Page did not finish loading within {timeout}ms",
                target=self.page.url,
                timeout=timeout,
            ) from e
        except PlaywrightError as e:
            raise self._translate(e, "wait for load of", self.page.url, timeout) from e

    # =========================================================================
    # Actions
    # =========================================================================

    async def click(
        self,
        target: Union[Target, str, ElementHandle],
        timeout: Optional[int] = None,
    ) -> None:
        """
        Click an element once it is visible and actionable.

        Raises:
            WaitTimeoutError: Element never became clickable within the bound
            StaleElementError: Handle left the DOM
            UIActionError: Any other interaction failure
        """
        target = as_target(target)
        timeout = self._bound(timeout)
        with allure.step(f"Click: {target.describe()}"):
            logger.debug(f"Clicking: {target.describe()}")
            try:
                if isinstance(target, ByLocator):
                    locator = self._locator(target.selector)
                    await locator.wait_for(state="visible", timeout=timeout)
                    await locator.click(timeout=timeout)
                else:
                    await target.element.wait_for_element_state("visible", timeout=timeout)
                    await target.element.click(timeout=timeout)
            except PlaywrightError as e:
                raise self._translate(e, "click", target, timeout) from e

    async def js_click(self, target: Union[Target, str, ElementHandle]) -> None:
        """
        Click through script execution, bypassing actionability checks.

        For elements present in the DOM but covered or still animating.
        """
        target = as_target(target)
        with allure.step(f"JS click: {target.describe()}"):
            element = await self._resolve(target)
            try:
                await element.evaluate("el => el.click()")
            except PlaywrightError as e:
                raise self._translate(e, "js-click", target) from e

    async def hover(
        self,
        target: Union[Target, str, ElementHandle],
        timeout: Optional[int] = None,
    ) -> None:
        """Move the mouse over an element."""
        target = as_target(target)
        timeout = self._bound(timeout)
        with allure.step(f"Hover: {target.describe()}"):
            try:
                if isinstance(target, ByLocator):
                    await self._locator(target.selector).hover(timeout=timeout)
                else:
                    await target.element.hover(timeout=timeout)
            except PlaywrightError as e:
                raise self._translate(e, "hover", target, timeout) from e

    async def send_keys(self, target: Union[Target, str, ElementHandle], text: str) -> None:
        """
        Type text into an element.

        A locator target is waited for, cleared and typed into key by key. A
        handle is focused and typed into through the page keyboard, keeping
        any existing value.
        """
        target = as_target(target)
        element = await self._resolve(target)
        try:
            if isinstance(target, ByLocator):
                locator = self._locator(target.selector)
                await locator.fill("")
                await locator.press_sequentially(text)
            else:
                await element.focus()
                await self.page.keyboard.type(text)
        except PlaywrightError as e:
            raise self._translate(e, "type into", target) from e

    async def press_key(self, target: Union[Target, str, ElementHandle], key: str) -> None:
        """Press a named key (``Tab``, ``Enter``) with the element focused."""
        target = as_target(target)
        element = await self._resolve(target)
        try:
            await element.press(key)
        except PlaywrightError as e:
            raise self._translate(e, f"press {key} on", target) from e

    async def press_chord(self, chord: str) -> None:
        """Press a key combination on the page, e.g. ``Alt+n``."""
        try:
            await self.page.keyboard.press(chord)
        except PlaywrightError as e:
            raise self._translate(e, f"press {chord} on", "page") from e

    async def perform_alt_n(self) -> None:
        await self.press_chord("Alt+n")

    async def scroll_into_view(self, target: Union[Target, str, ElementHandle]) -> None:
        """Scroll the element to the top of the viewport."""
        target = as_target(target)
        element = await self._resolve(target)
        try:
            await element.evaluate("el => el.scrollIntoView(true)")
        except PlaywrightError as e:
            raise self._translate(e, "scroll to", target) from e

    async def scroll_by(self, dx: int = 0, dy: int = 0) -> None:
        """Scroll the window by an offset."""
        try:
            await self.page.evaluate("([dx, dy]) => window.scrollBy(dx, dy)", [dx, dy])
        except PlaywrightError as e:
            raise self._translate(e, f"scroll by ({dx}, {dy})", "window") from e

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_text(self, target: Union[Target, str, ElementHandle]) -> str:
        """Return the rendered text of an element; logs and re-raises on failure."""
        target = as_target(target)
        try:
            element = await self._resolve(target)
            return await element.inner_text()
        except UIActionError as e:
            logger.error(f"Failed to get text from '{target.describe()}': {e}")
            raise
        except PlaywrightError as e:
            logger.error(f"Failed to get text from '{target.describe()}': {e}")
            raise self._translate(e, "read text of", target) from e

    async def get_attribute(
        self,
        target: Union[Target, str, ElementHandle],
        attribute_name: str,
    ) -> Optional[str]:
        """Return an attribute value; logs and re-raises on failure."""
        target = as_target(target)
        try:
            element = await self._resolve(target)
            return await element.get_attribute(attribute_name)
        except UIActionError as e:
            logger.error(f"Failed to get attribute '{attribute_name}' from element: {e}")
            raise
        except PlaywrightError as e:
            logger.error(f"Failed to get attribute '{attribute_name}' from element: {e}")
            raise self._translate(e, f"read '{attribute_name}' of", target) from e

    async def get_title(self) -> str:
        try:
            return await self.page.title()
        except PlaywrightError as e:
            raise self._translate(e, "read title of", "page") from e

    def get_current_url(self) -> str:
        return self.page.url

    # =========================================================================
    # Debug aids
    # =========================================================================

    async def highlight(
        self,
        target: Union[Target, str, ElementHandle],
        revert_after_ms: Optional[int] = None,
    ) -> bool:
        """
        Outline an element in red.

        Failures never propagate; they are logged as non-critical and kept in
        ``non_critical_failures`` for the report.

        Args:
            target: Element to outline
            revert_after_ms: Restore the original style after this delay

        Returns:
            True if the element was highlighted
        """
        try:
            target = as_target(target)
            if isinstance(target, ByLocator):
                element = await self.page.query_selector(target.selector)
                if element is None:
                    raise ElementNotFoundError(
                        f"Nothing to highlight for '{target.selector}'", target=target.selector
                    )
            else:
                element = target.element

            original_style = await element.get_attribute("style")
            await element.evaluate("(el, border) => { el.style.border = border; }", HIGHLIGHT_STYLE)

            if revert_after_ms:
                await asyncio.sleep(revert_after_ms / 1000)
                await element.evaluate(
                    "(el, style) => style === null ? el.removeAttribute('style') : el.setAttribute('style', style)",
                    original_style,
                )
            return True
        except (PlaywrightError, UIActionError, ValueError) as e:
            message = f"Highlight failed (non-critical): {e}"
            logger.warning(message)
            self.non_critical_failures.append(message)
            return False

    async def take_screenshot(self, name_prefix: str, directory: Optional[Path] = None) -> Path:
        """
        Capture the viewport into ``<prefix>_<yyyyMMdd_HHmmss>.png``.

        Args:
            name_prefix: File name prefix
            directory: Target directory; defaults to ``ui.screenshot_dir`` or
                the current working directory

        Returns:
            Path of the written file

        Raises:
            ScreenshotError: The image could not be captured or written
        """
        if directory is None:
            configured = get_config("ui.screenshot_dir", "")
            directory = Path(configured) if configured else Path.cwd()
        directory = Path(directory)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = directory / f"{name_prefix}_{timestamp}.png"

        with allure.step(f"Take screenshot: {name_prefix}"):
            try:
                image = await self.page.screenshot()
            except PlaywrightError as e:
                raise ScreenshotError(f"Failed to capture screenshot '{name_prefix}': {e}") from e

            try:
                path.write_bytes(image)
            except OSError as e:
                raise ScreenshotError(
                    f"Failed to save screenshot to {path}: {e}", target=str(path)
                ) from e

            allure.attach(image, name=name_prefix, attachment_type=allure.attachment_type.PNG)

        logger.info(f"Screenshot saved: {path}")
        return path


__all__ = [
    "CommonEvents",
    "HIGHLIGHT_STYLE",
    "is_detached_error",
]
