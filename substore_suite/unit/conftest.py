"""
================================================================================
Unit Test Configuration
================================================================================

In-memory stand-ins for the parts of the Playwright async API used by the
framework, so page objects can be exercised without a browser.

    page = FakePage()
    page.add_element("#login", on_click=lambda p: p.change_url_later("/home", 0.05))

Elements are keyed by the exact selector string the page object uses. Every
click and URL change is appended to ``page.events`` in order.

================================================================================
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from substore_suite.ui_testing.framework.config_loader import ConfigLoader


PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"

POLL_INTERVAL = 0.005


async def _poll(condition: Callable[[], bool], timeout: Optional[float], what: str) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + (timeout or 1000) / 1000
    while not condition():
        if loop.time() >= deadline:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded while waiting for {what}")
        await asyncio.sleep(POLL_INTERVAL)


class FakeElement:
    """Stand-in for ElementHandle."""

    def __init__(
        self,
        page: "FakePage",
        selector: str,
        text: str = "",
        visible: bool = True,
        enabled: bool = True,
        attributes: Optional[Dict[str, str]] = None,
        on_click: Optional[Callable[["FakePage"], Any]] = None,
    ):
        self.page = page
        self.selector = selector
        self.text = text
        self.visible = visible
        self.enabled = enabled
        self.attached = True
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.on_click = on_click
        self.value = ""
        self.pressed: List[str] = []
        self.clicks = 0
        self.js_clicks = 0
        self.hovered = False
        self.highlighted = False

    def __repr__(self) -> str:
        return f"FakeElement({self.selector!r})"

    def _ensure_attached(self) -> None:
        if not self.attached:
            raise PlaywrightError("Element is not attached to the DOM")

    def _fire_click(self) -> None:
        self.page.events.append(("click", self.selector))
        if self.on_click:
            self.on_click(self.page)

    async def is_visible(self) -> bool:
        self._ensure_attached()
        return self.visible

    async def wait_for_element_state(self, state: str, timeout: Optional[float] = None) -> None:
        self._ensure_attached()
        checks = {
            "visible": lambda: self.visible,
            "hidden": lambda: not self.visible,
            "enabled": lambda: self.enabled,
            "disabled": lambda: not self.enabled,
            "stable": lambda: True,
        }
        await _poll(checks[state], timeout, f"{self.selector} to be {state}")
        self._ensure_attached()

    async def click(self, timeout: Optional[float] = None) -> None:
        self._ensure_attached()
        await _poll(lambda: self.visible and self.enabled, timeout, f"{self.selector} to be clickable")
        self.clicks += 1
        self._fire_click()

    async def hover(self, timeout: Optional[float] = None) -> None:
        self._ensure_attached()
        await _poll(lambda: self.visible, timeout, f"{self.selector} to be hoverable")
        self.hovered = True
        self.page.events.append(("hover", self.selector))
        for callback in self.page.hover_callbacks.get(self.selector, []):
            callback(self.page)

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self._ensure_attached()
        if "el.click()" in expression:
            self.js_clicks += 1
            self._fire_click()
        elif "style.border" in expression:
            self.highlighted = True
            self.attributes["style"] = f"border: {arg};"
        elif "setAttribute('style'" in expression:
            if arg is None:
                self.attributes.pop("style", None)
            else:
                self.attributes["style"] = arg
        elif "scrollIntoView" in expression:
            self.page.events.append(("scroll", self.selector))
        return None

    async def get_attribute(self, name: str) -> Optional[str]:
        self._ensure_attached()
        return self.attributes.get(name)

    async def inner_text(self) -> str:
        self._ensure_attached()
        return self.text

    async def fill(self, value: str) -> None:
        self._ensure_attached()
        self.value = value

    async def focus(self) -> None:
        self._ensure_attached()
        self.page.focused = self

    def _type(self, text: str) -> None:
        self.value += text
        self.page.events.append(("type", self.selector, text))

    async def press(self, key: str) -> None:
        self._ensure_attached()
        self.pressed.append(key)
        self.page.events.append(("press", self.selector, key))


class FakeLocator:
    """Stand-in for Locator; resolves lazily against the page's element table."""

    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    @property
    def first(self) -> "FakeLocator":
        return self

    def _element(self) -> Optional[FakeElement]:
        return self.page.first_attached(self.selector)

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        if state == "visible":
            condition = lambda: bool(self._element() and self._element().visible)
        else:
            condition = lambda: self._element() is not None
        await _poll(condition, timeout, f"locator('{self.selector}') to be {state}")

    async def is_visible(self) -> bool:
        element = self._element()
        return bool(element and element.visible)

    async def click(self, timeout: Optional[float] = None) -> None:
        await _poll(lambda: self._element() is not None, timeout, f"locator('{self.selector}')")
        await self._element().click(timeout=timeout)

    async def hover(self, timeout: Optional[float] = None) -> None:
        await _poll(lambda: self._element() is not None, timeout, f"locator('{self.selector}')")
        await self._element().hover(timeout=timeout)

    async def fill(self, value: str, timeout: Optional[float] = None) -> None:
        await _poll(lambda: self._element() is not None, timeout, f"locator('{self.selector}')")
        await self._element().fill(value)

    async def press_sequentially(self, text: str, timeout: Optional[float] = None) -> None:
        await _poll(lambda: self._element() is not None, timeout, f"locator('{self.selector}')")
        element = self._element()
        element._ensure_attached()
        element._type(text)


class FakeKeyboard:
    def __init__(self, page: "FakePage"):
        self.page = page

    async def press(self, key: str) -> None:
        self.page.events.append(("keyboard", key))

    async def type(self, text: str) -> None:
        focused = self.page.focused
        if focused is None:
            return
        focused._ensure_attached()
        focused._type(text)


class FakePage:
    """Stand-in for Page with a mutable element table and URL."""

    def __init__(self, url: str = "http://emr.local/#/Home", title: str = "EMR"):
        self._url = url
        self._title = title
        self.elements: Dict[str, List[FakeElement]] = {}
        self.hover_callbacks: Dict[str, List[Callable[["FakePage"], Any]]] = {}
        self.events: List[tuple] = []
        self.keyboard = FakeKeyboard(self)
        self.screenshot_error: Optional[Exception] = None
        self.evaluations: List[tuple] = []
        self.visited: List[str] = []
        self.focused: Optional[FakeElement] = None

    # ------------------------------------------------------------------
    # Test setup helpers
    # ------------------------------------------------------------------

    def add_element(self, selector: str, **kwargs: Any) -> FakeElement:
        element = FakeElement(self, selector, **kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def first_attached(self, selector: str) -> Optional[FakeElement]:
        for element in self.elements.get(selector, []):
            if element.attached:
                return element
        return None

    def set_url(self, url: str) -> None:
        self._url = url
        self.events.append(("url", url))

    def change_url_later(self, url: str, delay: float) -> None:
        asyncio.get_running_loop().call_later(delay, self.set_url, url)

    def show_later(self, element: FakeElement, delay: float) -> None:
        def _show() -> None:
            element.visible = True
        asyncio.get_running_loop().call_later(delay, _show)

    def on_hover(self, selector: str, callback: Callable[["FakePage"], Any]) -> None:
        self.hover_callbacks.setdefault(selector, []).append(callback)

    def clicked(self) -> List[str]:
        return [event[1] for event in self.events if event[0] == "click"]

    # ------------------------------------------------------------------
    # Playwright Page surface
    # ------------------------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    async def wait_for_selector(
        self,
        selector: str,
        state: str = "visible",
        timeout: Optional[float] = None,
    ) -> Optional[FakeElement]:
        await _poll(lambda: self.first_attached(selector) is not None, timeout, f"selector '{selector}'")
        return self.first_attached(selector)

    async def query_selector(self, selector: str) -> Optional[FakeElement]:
        return self.first_attached(selector)

    async def query_selector_all(self, selector: str) -> List[FakeElement]:
        return [e for e in self.elements.get(selector, []) if e.attached]

    async def wait_for_url(self, url: Any, timeout: Optional[float] = None) -> None:
        matches = url if callable(url) else (lambda current: current == url)
        await _poll(lambda: matches(self._url), timeout, f"URL {url!r}")

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        return None

    async def goto(self, url: str, wait_until: str = "load") -> None:
        self.visited.append(url)
        self.set_url(url)

    async def title(self) -> str:
        return self._title

    async def screenshot(self, **kwargs: Any) -> bytes:
        if self.screenshot_error:
            raise self.screenshot_error
        return PNG_BYTES

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        self.evaluations.append((expression, arg))
        return None


# ================================================================================
# Fixtures
# ================================================================================

@pytest.fixture
def fake_page() -> FakePage:
    """Fresh fake page per test."""
    return FakePage()


@pytest.fixture(autouse=True)
def _fresh_config():
    """Reload configuration per test so env overrides set by a test take effect."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
