"""
================================================================================
Search Results Page Object (Async / Playwright)
================================================================================

Search listing: result cards, condition/price/location filters and sorting.

Every filter follows the same shape: open the sub-menu, pause like a human,
then race the selection click against the URL change that proves the filter
was applied. A URL that never changes is reported as FilterNotApplied.

================================================================================
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional, Tuple, Union

import allure
from loguru import logger

from classifieds_suites.ui_testing.framework.action_coordinator import Action
from classifieds_suites.ui_testing.framework.exceptions import (
    FilterNotAppliedError,
    NoResultsError,
    WaitTimeoutError,
)
from classifieds_suites.ui_testing.framework.page_base import BasePage
from classifieds_suites.ui_testing.framework.smart_locator import SelectorStrategy, SmartLocator
from classifieds_suites.ui_testing.framework.wait_helpers import (
    url_all,
    url_changed_from,
    url_condition,
    url_matches,
    url_query_value,
    WaitCondition,
    wait_load_state,
    wait_visible,
)


class Condition(Enum):
    """Item condition filter and the `state` query value it produces."""

    NEW = ("Novo", "1")
    USED = ("Korišteno", "2")

    def __init__(self, label: str, state: str):
        self.label = label
        self.state = state

    @property
    def url_pattern(self) -> "re.Pattern[str]":
        return re.compile(rf"[?&]state={self.state}(&|$)")


class SortOption(Enum):
    """Sort menu entries and the URL markers they produce."""

    LOWEST_PRICE = ("Najniža", "asc")
    HIGHEST_PRICE = ("Najviša", "desc")

    def __init__(self, label: str, order: str):
        self.label = label
        self.order = order

    @property
    def url_markers(self) -> Tuple[str, str]:
        return ("sort_by=price", f"sort_order={self.order}")

    @classmethod
    def parse(cls, value: Union[str, "SortOption"]) -> "SortOption":
        """Accept an enum member or a human alias ('lowest price', 'jeftinije')."""
        if isinstance(value, cls):
            return value
        aliases = {
            "lowest price": cls.LOWEST_PRICE,
            "jeftinije": cls.LOWEST_PRICE,
            "highest price": cls.HIGHEST_PRICE,
            "skuplje": cls.HIGHEST_PRICE,
        }
        try:
            return aliases[value.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown sort option: {value!r}") from None


class SearchPage(BasePage):
    """Search results page object (async)."""

    URL_PATH = "/pretraga"
    PAGE_TITLE = "Pretraga"

    def __init__(self, page, settings=None, rng=None):
        super().__init__(page, settings, rng)

        self.filter_menu_trigger = self.smart_locator(
            "filter_menu_trigger",
            SelectorStrategy.css("div.label-wrap", has_text="Filteri oglasa"),
        )
        self.condition_new_button = self.smart_locator(
            "condition_new_button",
            SelectorStrategy.css("#buttonNovo"),
            SelectorStrategy.css("label, button, span", has_text=re.compile(r"^Novo$")),
        )
        self.condition_used_button = self.smart_locator(
            "condition_used_button",
            SelectorStrategy.css("#buttonKorišteno"),
            SelectorStrategy.css("label, button, span", has_text=re.compile(r"^Korišteno$")),
        )
        self.price_min_input = self.smart_locator(
            "price_min_input",
            SelectorStrategy.css('input[placeholder="od"]'),
        )
        self.price_max_input = self.smart_locator(
            "price_max_input",
            SelectorStrategy.css('input[placeholder="do"]'),
        )
        self.location_trigger = self.smart_locator(
            "location_trigger",
            SelectorStrategy.text("Lokacija", exact=True),
            SelectorStrategy.css("div, button", has_text=re.compile(r"^Lokacija$")),
        )
        self.city_search_input = self.smart_locator(
            "city_search_input",
            SelectorStrategy.css('input[placeholder*="Pretraži"]'),
            SelectorStrategy.css('input[placeholder*="Lokacija"]'),
        )
        self.sort_menu_trigger = self.smart_locator(
            "sort_menu_trigger",
            SelectorStrategy.css("div.label-wrap", has_text="Sortiraj"),
        )
        self.result_cards = self.smart_locator(
            "result_cards",
            SelectorStrategy.css('a[href*="/artikal/"]'),
        )
        self.product_heading = self.smart_locator(
            "product_heading",
            SelectorStrategy.css(".main-heading"),
        )
        self.product_price = self.smart_locator(
            "product_price",
            SelectorStrategy.css(".smaller"),
        )
        self.no_results_message = self.smart_locator(
            "no_results_message",
            SelectorStrategy.text("Nema rezultata"),
        )
        self.next_page_button = self.smart_locator(
            "next_page_button",
            SelectorStrategy.css('button:has(img[src*="chevron-right"])'),
        )

    async def _open_filter_menu(self) -> None:
        await self.driver.click(self.filter_menu_trigger)
        await self.driver.human_delay()

    async def _apply_filter(self, step: str, action: Action, expectation: WaitCondition) -> str:
        """Race the selection against its URL expectation, mapping timeouts."""
        try:
            return await self.coordinator.act_with_expectation(action, expectation, step=step)
        except WaitTimeoutError as exc:
            raise FilterNotAppliedError.from_error(step, exc) from exc

    @allure.step("Filter by condition: {condition}")
    async def filter_by_condition(self, condition: Condition) -> str:
        """
        Apply the item condition filter.

        Raises:
            FilterNotAppliedError: When the URL never shows the state parameter
        """
        step = "filter_by_condition"
        button = self.condition_new_button if condition is Condition.NEW else self.condition_used_button
        try:
            await self._open_filter_menu()
        except WaitTimeoutError as exc:
            raise FilterNotAppliedError.from_error(step, exc) from exc

        url = await self._apply_filter(
            step,
            lambda: self.driver.click(button),
            url_condition(self.page, url_matches(condition.url_pattern), self.timeouts.filter_ms),
        )
        await wait_load_state(self.page, "domcontentloaded", self.timeouts.filter_ms)
        return url

    @allure.step("Set price range: {min_price} - {max_price}")
    async def set_price_range(
        self,
        min_price: Optional[int] = None,
        max_price: Optional[int] = None,
    ) -> str:
        """
        Type the price bounds and submit them.

        Raises:
            FilterNotAppliedError: When the URL does not change to carry each bound
                as a query parameter value
        """
        if min_price is None and max_price is None:
            raise ValueError("At least one of min_price / max_price is required")

        step = "set_price_range"
        snapshot = self.page.url
        try:
            if not await self.price_min_input.is_visible():
                await self._open_filter_menu()
            if min_price is not None:
                await self.driver.type_text(self.price_min_input, str(min_price))
            if max_price is not None:
                await self.driver.type_text(self.price_max_input, str(max_price))
        except WaitTimeoutError as exc:
            raise FilterNotAppliedError.from_error(step, exc) from exc

        bounds = [url_query_value(str(value)) for value in (min_price, max_price) if value is not None]
        return await self._apply_filter(
            step,
            lambda: self.driver.press_key("Enter"),
            url_condition(self.page, url_all(url_changed_from(snapshot), *bounds), self.timeouts.filter_ms),
        )

    @allure.step("Select location: {city}")
    async def select_location(self, city: str) -> str:
        """
        Pick a city in the location filter.

        Uses the city search box when the menu offers one, otherwise clicks
        the city in the list.

        Raises:
            FilterNotAppliedError: When the URL does not change
        """
        step = "select_location"
        snapshot = self.page.url
        try:
            await self.driver.click(self.location_trigger)
            await self.driver.human_delay()

            if await self.city_search_input.is_visible():
                await self.driver.fill(self.city_search_input, city)
                action = lambda: self.driver.press_key("Enter")
            else:
                city_option = SmartLocator(
                    self.page, f"city_option[{city}]", [SelectorStrategy.text(city, exact=True)]
                )
                action = lambda: self.driver.click(city_option)
        except WaitTimeoutError as exc:
            raise FilterNotAppliedError.from_error(step, exc) from exc

        return await self._apply_filter(
            step,
            action,
            url_condition(self.page, url_changed_from(snapshot), self.timeouts.location_ms),
        )

    @allure.step("Sort results: {option}")
    async def select_sort(self, option: Union[str, SortOption]) -> str:
        """
        Choose a sort order and wait for the re-sorted listing.

        Returns:
            The sorted result URL

        Raises:
            FilterNotAppliedError: When the URL does not change from its pre-sort snapshot
        """
        option = SortOption.parse(option)
        step = "select_sort"
        snapshot = self.page.url
        sort_entry = SmartLocator(
            self.page, f"sort_option[{option.label}]", [SelectorStrategy.text(option.label)]
        )

        try:
            await self.driver.click(self.sort_menu_trigger)
            await self.driver.human_delay()
        except WaitTimeoutError as exc:
            raise FilterNotAppliedError.from_error(step, exc) from exc

        url = await self._apply_filter(
            step,
            lambda: self.driver.click(sort_entry),
            url_condition(self.page, url_changed_from(snapshot), self.timeouts.sort_ms),
        )
        await wait_visible(self.result_cards, self.timeouts.results_ms)
        return url

    @allure.step("Verify results exist")
    async def verify_results_exist(self) -> int:
        """
        Wait for at least one visible result card.

        Returns:
            Number of result cards on the page

        Raises:
            NoResultsError: When no card shows up in time or the count is zero
        """
        step = "verify_results_exist"
        try:
            cards = await wait_visible(self.result_cards, self.timeouts.results_ms)
        except WaitTimeoutError as exc:
            raise NoResultsError.from_error(step, exc) from exc

        count = await cards.count()
        logger.info(f"Found {count} result listings")
        if count == 0:
            raise NoResultsError(step=step, expected="at least one result listing", observed="0 results")
        return count

    async def first_heading_text(self) -> str:
        """Text of the first result heading."""
        heading = await wait_visible(self.product_heading, self.timeouts.results_ms)
        return (await heading.first.text_content() or "").strip()


__all__ = [
    "SearchPage",
    "Condition",
    "SortOption",
]
