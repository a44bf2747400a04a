"""
================================================================================
Login Page Object (Async / Playwright)
================================================================================

Login workflow for the hospital application.

Credentials come from the `LoginData.json` fixture in the data directory:

    { "ValidLogin": { "Username": "...", "Password": "..." } }

The fixture is read when `perform_login()` is called, so a fixture missing
keys fails before the form is touched.

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Page

from substore_suite.ui_testing.framework.data_reader import get_value, load_json
from substore_suite.ui_testing.framework.errors import TestDataError
from substore_suite.ui_testing.framework.page_base import PageBase


@dataclass(frozen=True)
class LoginLocators:
    """Selectors for the login form and the post-login header."""

    username_input: str = "#username_id"
    password_input: str = "#password"
    login_button: str = "#login"
    admin_dropdown: str = "xpath=//li[@class=\"dropdown dropdown-user\"]"
    log_out: str = "xpath=//a[text() = ' Log Out ']"


class LoginPage(PageBase):
    """Login page object (async)."""

    URL_PATH = "/"
    PAGE_TITLE = "Login"

    DEFAULT_DATA_FILE = "LoginData.json"
    USERNAME_KEY = "ValidLogin.Username"
    PASSWORD_KEY = "ValidLogin.Password"

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        data_file: Union[str, Path] = DEFAULT_DATA_FILE,
        timeout: Optional[int] = None,
    ):
        super().__init__(page, base_url=base_url, timeout=timeout)
        self.locators = LoginLocators()
        self.data_file = data_file

    @allure.step("Open login page")
    async def open(self) -> "LoginPage":
        """Navigate to the login page."""
        await self.navigate()
        await self.events.wait_for_page_load()
        return self

    def load_credentials(self) -> Tuple[str, str]:
        """Read username and password from the login fixture."""
        data = load_json(self.data_file)
        return self._credential(data, self.USERNAME_KEY), self._credential(data, self.PASSWORD_KEY)

    @staticmethod
    def _credential(data: Mapping[str, Any], key: str) -> str:
        value = get_value(data, key)
        if not isinstance(value, str):
            raise TestDataError(
                f"Test data key '{key}' must be a string, got {type(value).__name__}", key=key
            )
        return value

    async def perform_login(self) -> None:
        """
        Log in with the fixture credentials.

        Blocks until the user dropdown in the header is visible.

        Raises:
            TestDataError: Fixture missing or lacking a credential key
            WorkflowError: Form interaction failed or the marker never appeared
        """
        username, password = self.load_credentials()
        logger.info(f"Username: {username}, Password: {'*' * len(password)}")

        async with self.workflow("Perform login"):
            await self.events.send_keys(self.locators.username_input, username)
            await self.events.send_keys(self.locators.password_input, password)
            await self.events.click(self.locators.login_button)
            await self.events.wait_for_element_to_be_visible(
                self.locators.admin_dropdown, timeout=self.timeout
            )
            logger.info("Login successful")

    async def perform_logout(self) -> None:
        """Open the user dropdown, click Log Out and wait for the login form."""
        async with self.workflow("Perform logout"):
            await self.events.click(self.locators.admin_dropdown)
            await self.events.click(self.locators.log_out)
            await self.events.wait_for_element_to_be_visible(
                self.locators.username_input, timeout=self.timeout
            )

    async def is_logged_in(self) -> bool:
        return await self.events.is_displayed(self.locators.admin_dropdown)


__all__ = [
    "LoginLocators",
    "LoginPage",
]
