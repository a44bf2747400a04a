"""
================================================================================
Substore (WardSupply) Page Object
================================================================================

Workflows for the Substore module: tab navigation, counters, hover help,
Inventory sub-modules, the requisition list and requisition creation.

Key Features:
- Immutable locator catalog built once per page object
- One linear workflow per test case, each returning a bool or a string
- Condition waits between steps instead of fixed sleeps
- Allure step integration for detailed reporting

================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Page

from substore_suite.ui_testing.framework.config_loader import get_config
from substore_suite.ui_testing.framework.data_reader import require_keys
from substore_suite.ui_testing.framework.errors import VerificationError
from substore_suite.ui_testing.framework.page_base import PageBase
from substore_suite.ui_testing.framework.targets import ByHandle


def anchor_by_text(text: str) -> str:
    """Selector for a link whose text contains ``text``."""
    return f"xpath=//a[contains(text(),'{text}')]"


@dataclass(frozen=True)
class SubstoreLocators:
    """Selectors used by the Substore workflows."""

    # Module entry
    substore_tab: str = "xpath=//a[@href='#/WardSupply']"

    # Counters
    counter_button: str = "xpath=//a[@class='report_list']"

    # Hover help
    module_signout: str = "xpath=//i[contains(@class,'sign-out')]"
    hover_text: str = "xpath=//h6[contains(text(),'To change, you can always click here.')]"

    # Sub-modules
    inventory: str = anchor_by_text("Inventory")
    pharmacy: str = anchor_by_text("Pharmacy")
    sub_module_tabs: str = "xpath=//ul[contains(@class,'nav-tabs')]//li//a"
    stock: str = anchor_by_text("Stock")
    inventory_requisition: str = anchor_by_text("Inventory Requisition")
    consumption: str = anchor_by_text("Consumption")
    reports: str = anchor_by_text("Reports")
    patient_consumption: str = anchor_by_text("Patient Consumption")
    return_tab: str = anchor_by_text("Return")

    # Requisition list
    create_requisition_button: str = "xpath=//button/span[text()='Create Requisition']"
    search_bar: str = "#quickFilterInput"
    star_icon: str = "xpath=//i[contains(@class,'icon-favourite')]/.."
    button_first: str = "xpath=//button[contains(text(),'First')]"
    button_previous: str = "xpath=//button[contains(text(),'Previous')]"
    button_next: str = "xpath=//button[contains(text(),'Next')]"
    button_last: str = "xpath=//button[contains(text(),'Last')]"
    button_ok: str = "xpath=//button[contains(text(),'OK')]"
    radio_pending: str = "xpath=//label[contains(text(),'Pending')]/span"
    radio_complete: str = "xpath=//label[contains(text(),'Complete')]/span"
    radio_cancelled: str = "xpath=//label[contains(text(),'Cancelled')]/span"
    radio_withdrawn: str = "xpath=//label[contains(text(),'Withdrawn')]/span"
    radio_all: str = "xpath=//label[contains(text(),'All')]/span"

    # Requisition form
    request_button: str = "input#save_requisition"
    target_inventory: str = "xpath=//input[@id='activeInventory']"
    item_name: str = "xpath=//input[@id='itemName0']"
    required_quantity: str = "xpath=//input[@id='qtyip0']"
    popup_close_button: str = "a.close-btn"
    close_modal: str = "a[title='Cancel']"

    @staticmethod
    def anchor_by_text(text: str) -> str:
        return anchor_by_text(text)

    @staticmethod
    def popup_message(status: str, message: str) -> str:
        """Selector for a notification paragraph carrying ``status`` and ``message``."""
        return f"xpath=//p[contains(text(),' {status} ')]/../p[contains(text(),'{message}')]"

    def navigation_steps(self) -> Tuple[Tuple[str, str], ...]:
        """Inventory sub-views in visiting order, as (link, URL fragment)."""
        return (
            (self.stock, "Inventory/Stock"),
            (self.inventory_requisition, "Inventory/InventoryRequisitionList"),
            (self.consumption, "Inventory/Consumption/ConsumptionList"),
            (self.reports, "Inventory/Reports"),
            (self.patient_consumption, "Inventory/PatientConsumption/PatientConsumptionList"),
            (self.return_tab, "Inventory/Return"),
        )

    def requisition_list_controls(self) -> Tuple[Tuple[str, str], ...]:
        """Controls expected on the requisition list, as (name, selector)."""
        return (
            ("First button", self.button_first),
            ("Previous button", self.button_previous),
            ("Next button", self.button_next),
            ("Last button", self.button_last),
            ("OK button", self.button_ok),
            ("Create Requisition button", self.create_requisition_button),
            ("Search bar", self.search_bar),
            ("Favourite star", self.star_icon),
            ("Pending filter", self.radio_pending),
            ("Complete filter", self.radio_complete),
            ("Cancelled filter", self.radio_cancelled),
            ("Withdrawn filter", self.radio_withdrawn),
            ("All filter", self.radio_all),
        )


class SubstorePage(PageBase):
    """
    Page Object for the Substore (WardSupply) module.

    Each workflow is independent: it assumes a logged-in session and issues
    a fixed sequence of interactions.
    """

    URL_PATH = "/#/WardSupply"
    PAGE_TITLE = "Substore"

    SUBSTORE_URL_FRAGMENT = "WardSupply"
    SCREENSHOT_PREFIX = "SubStore"
    SUCCESS_MESSAGE = "Requisition is Generated and Saved"

    def __init__(
        self,
        page: Page,
        base_url: str = "",
        timeout: Optional[int] = None,
        url_timeout: Optional[int] = None,
    ):
        """
        Args:
            page: Playwright Page object
            base_url: Application base URL
            timeout: Page-level wait bound in ms (``ui.page_timeout``)
            url_timeout: Bound for sub-module URL waits in ms (``ui.url_wait_timeout``)
        """
        super().__init__(page, base_url=base_url, timeout=timeout)
        self.locators = SubstoreLocators()
        self.url_timeout = (
            url_timeout if url_timeout is not None else get_config("ui.url_wait_timeout", 5000)
        )

    # ============================================================
    # TC-1: Substore tab
    # ============================================================

    async def scroll_to_substore_tab_and_verify_url(self) -> str:
        """Open the Substore tab from the side menu and return the resulting URL."""
        async with self.workflow("Click Substore tab and verify URL"):
            substore_tab = await self.events.find_element(self.locators.substore_tab)
            await self.events.scroll_into_view(substore_tab)
            await self.events.scroll_by(0, -50)
            await self.events.highlight(substore_tab)
            await self.events.click(ByHandle(substore_tab, "Substore tab"))
            await self.events.wait_for_url_contains(self.SUBSTORE_URL_FRAGMENT, self.timeout)
            return self.events.get_current_url()

    # ============================================================
    # TC-2: Optional counter
    # ============================================================

    async def click_fourth_counter_if_available(self) -> bool:
        """Click the first counter link if any exists; no counter is still a pass."""
        async with self.workflow("Click counter if available"):
            counters = await self.events.get_web_elements(self.locators.counter_button)
            logger.info(f"Elements size >> {len(counters)}")

            if counters:
                await self.events.highlight(counters[0])
                await self.events.click(ByHandle(counters[0], "counter"))

            return True

    # ============================================================
    # TC-3: Hover help text
    # ============================================================

    async def verify_module_signout_hover_text(self, expected: Mapping[str, str]) -> bool:
        """
        Hover the module sign-out icon and compare its help text.

        Args:
            expected: Must contain ``moduleSignOutHoverText``

        Raises:
            TestDataError: Expected text key missing
            WorkflowError: Wrapping VerificationError on mismatch
        """
        require_keys(expected, ["moduleSignOutHoverText"], "substore expected data")
        expected_text = expected["moduleSignOutHoverText"]

        async with self.workflow("Verify module sign-out hover text"):
            await self.events.click(self.locators.inventory)
            await self.events.hover(self.locators.module_signout)
            await self.events.wait_for_element_to_be_visible(self.locators.hover_text)

            actual_text = await self.events.get_text(self.locators.hover_text)
            logger.info(f"Element text --> {actual_text}")

            if expected_text not in actual_text:
                raise VerificationError(
                    "Hover text did not match the expected value",
                    expected=expected_text,
                    actual=actual_text,
                    target=self.locators.hover_text,
                )
            return True

    # ============================================================
    # TC-4: Sub-modules
    # ============================================================

    async def verify_substore_sub_module(self, expected: Mapping[str, str]) -> bool:
        """
        Open the Inventory and Pharmacy sub-modules in turn.

        Args:
            expected: Must contain ``URL``
        """
        require_keys(expected, ["URL"], "substore expected data")

        async with self.workflow("Verify Substore sub-modules"):
            logger.info(f"Substore Page URL: {expected['URL']}")

            inventory = await self.events.find_element(self.locators.inventory)
            pharmacy = await self.events.find_element(self.locators.pharmacy)

            await self.events.highlight(inventory)
            await self.events.click(self.locators.inventory)

            await self.events.highlight(pharmacy)
            await self.events.click(self.locators.pharmacy)

            return True

    # ============================================================
    # TC-5: Sub-module visibility
    # ============================================================

    async def sub_module_present_inventory(self) -> bool:
        """Open Inventory and report whether any of its sub-module tabs is displayed."""
        async with self.workflow("Verify Inventory sub-modules are present"):
            await self.events.click(self.locators.inventory)

            sub_modules = await self.events.get_web_elements(self.locators.sub_module_tabs)
            logger.info(f"Sub-module count: {len(sub_modules)}")

            if not sub_modules:
                logger.warning("No sub-modules found under the Inventory module")
                return False

            any_displayed = False
            for sub_module in sub_modules:
                displayed = await self.events.is_displayed(sub_module)
                logger.debug(f"Sub-module displayed: {displayed}")
                any_displayed = any_displayed or displayed
            return any_displayed

    # ============================================================
    # TC-6: Navigation between sub-modules
    # ============================================================

    async def verify_navigation_between_submodules(self) -> bool:
        """
        Walk Stock, Inventory Requisition, Consumption, Reports,
        Patient Consumption and Return, waiting for each URL before the
        next click, then return to Stock.
        """
        async with self.workflow("Navigate between Inventory sub-modules"):
            await self.events.click(self.locators.inventory)

            for link, url_fragment in self.locators.navigation_steps():
                with allure.step(f"Open {url_fragment}"):
                    await self.events.click(link)
                    await self.events.wait_for_url_contains(url_fragment, self.url_timeout)

            await self.events.click(self.locators.stock)
            return True

    # ============================================================
    # TC-7: Screenshot
    # ============================================================

    async def take_screenshot_of_current_page(self) -> bool:
        """Save a ``SubStore_<timestamp>.png`` screenshot of the viewport."""
        async with self.workflow("Capture Substore screenshot"):
            await self.events.take_screenshot(self.SCREENSHOT_PREFIX)
            return True

    # ============================================================
    # TC-8: Requisition list controls
    # ============================================================

    async def verify_inventory_requisition_ui_elements(self) -> bool:
        """Open Inventory Requisition and check all list controls are displayed."""
        async with self.workflow("Verify Inventory Requisition UI elements"):
            await self.events.click(self.locators.anchor_by_text("Inventory Requisition"))
            await self.events.wait_for_url_contains(
                "Inventory/InventoryRequisitionList", self.url_timeout
            )

            controls: List[Tuple[str, Any]] = []
            for name, selector in self.locators.requisition_list_controls():
                controls.append((name, await self.events.find_element(selector)))

            for name, element in controls:
                await self.events.highlight(element)
                if not await self.events.is_displayed(element):
                    raise VerificationError(
                        f"Visibility check failed for: {name}",
                        expected="displayed",
                        actual="hidden",
                        target=name,
                    )
            return True

    # ============================================================
    # TC-9: Create requisition
    # ============================================================

    async def verify_create_requisition_button(
        self,
        target_inventory: Optional[str] = None,
        item_name: Optional[str] = None,
        quantity: Optional[Union[str, int]] = None,
    ) -> str:
        """
        Create a requisition and return the success notification text.

        Defaults come from ``substore.requisition.*`` in the configuration.

        Args:
            target_inventory: Inventory to request from
            item_name: Item to request
            quantity: Requested quantity
        """
        if target_inventory is None:
            target_inventory = get_config("substore.requisition.target_inventory", "General-Inventory")
        if item_name is None:
            item_name = get_config("substore.requisition.item_name", "tissue")
        if quantity is None:
            quantity = get_config("substore.requisition.quantity", "5")
        quantity = str(quantity)

        async with self.workflow("Create requisition"):
            create_button = await self.events.find_element(self.locators.create_requisition_button)
            await self.events.highlight(create_button)
            await self.events.click(ByHandle(create_button, "Create Requisition button"))
            await self.events.wait_for_url_contains(
                "Inventory/InventoryRequisitionItem", self.url_timeout
            )

            request_button = await self.events.find_element(self.locators.request_button)
            await self.events.wait_till_element_visible(request_button, self.timeout)

            with allure.step(f"Fill target inventory: {target_inventory}"):
                await self.events.click(self.locators.target_inventory)
                await self.events.send_keys(self.locators.target_inventory, target_inventory)
                await self.events.press_key(self.locators.target_inventory, "Tab")
                await self.events.press_key(self.locators.target_inventory, "Tab")

            with allure.step(f"Fill item: {item_name}"):
                item_field = await self.events.find_element(self.locators.item_name)
                await self.events.highlight(item_field)
                await self.events.send_keys(item_field, item_name)
                await self.events.press_key(item_field, "Enter")

            with allure.step(f"Fill quantity: {quantity}"):
                quantity_field = await self.events.find_element(self.locators.required_quantity)
                await self.events.highlight(quantity_field)
                await self.events.send_keys(quantity_field, quantity)

            await self.events.highlight(request_button)
            await self.events.wait_till_element_interactable(request_button, self.timeout)
            await self.events.click(ByHandle(request_button, "Request button"))

            success_element = await self.events.find_element(
                self.locators.popup_message("success", self.SUCCESS_MESSAGE)
            )
            success_message = await self.events.get_text(success_element)
            logger.info(f"Requisition popup: {success_message}")

            await self.events.click(self.locators.popup_close_button)
            await self.events.click(self.locators.close_modal)

            return success_message


__all__ = [
    "SubstoreLocators",
    "SubstorePage",
    "anchor_by_text",
]
