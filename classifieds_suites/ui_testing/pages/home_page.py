"""
================================================================================
Home Page Object (Async / Playwright)
================================================================================

Entry page of the marketplace: cookie consent, search box, suggestions,
category navigation, login and the "post ad" entry point.

Highlights:
  - Cookie consent handled as an optional overlay (absent is fine)
  - Search keyword typed with human pacing, Enter raced against the URL change
  - Login submit raced against the redirect to the site origin

================================================================================
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

import allure
from loguru import logger

from classifieds_suites.ui_testing.framework.exceptions import AuthFailedError, WaitTimeoutError
from classifieds_suites.ui_testing.framework.page_base import BasePage
from classifieds_suites.ui_testing.framework.smart_locator import (
    ResolveMode,
    SelectorStrategy,
    SmartLocator,
)
from classifieds_suites.ui_testing.framework.wait_helpers import (
    hidden_condition,
    url_all,
    url_changed_from,
    url_equals,
    url_matches,
    wait_visible,
    wait_visible_optional,
)


SEARCH_RESULT_MARKER = re.compile(r"q=|pretraga")
LOGIN_ROUTE = re.compile(r"login|prijava")
LISTING_ROUTE = re.compile(r"/artikal/")


class ConsentOutcome(str, Enum):
    """Result of the cookie consent step."""

    ACCEPTED = "accepted"
    NOT_PRESENT = "not_present"


class HomePage(BasePage):
    """Home page object (async)."""

    URL_PATH = "/"
    PAGE_TITLE = "OLX.ba"

    def __init__(self, page, settings=None, rng=None):
        super().__init__(page, settings, rng)

        self.accept_cookies_button = self.smart_locator(
            "accept_cookies_button",
            SelectorStrategy.css("#accept-btn"),
            SelectorStrategy.role("button", "Prihvati"),
        )
        self.logo = self.smart_locator(
            "logo",
            SelectorStrategy.alt_text("olx-logo"),
            SelectorStrategy.css("header a.logo"),
            SelectorStrategy.css('img[alt*="olx"]'),
        )
        self.search_input = self.smart_locator(
            "search_input",
            SelectorStrategy.css('input[name="notASearchField"]'),
        )
        self.categories_link = self.smart_locator(
            "categories_link",
            SelectorStrategy.role("link", "Kategorije", exact=True),
        )
        self.footer = self.smart_locator(
            "footer",
            SelectorStrategy.css("#olx-home-footer"),
        )
        self.copyright_text = self.smart_locator(
            "copyright_text",
            SelectorStrategy.css(".footer-copyright p"),
        )
        self.post_ad_button = self.smart_locator(
            "post_ad_button",
            SelectorStrategy.css("button", has_text=re.compile("Objavi oglas", re.IGNORECASE)),
        )
        self.search_suggestions = self.smart_locator(
            "search_suggestions",
            SelectorStrategy.css(".suggestions"),
            SelectorStrategy.css(".search-suggestions"),
            SelectorStrategy.css('[class*="suggestion"]'),
            mode=ResolveMode.ANY_OF,
        )
        self.suggestion_rows = self.smart_locator(
            "suggestion_rows",
            SelectorStrategy.css(".lin-list .lin-row-text"),
        )
        self.suggestions_title = self.smart_locator(
            "suggestions_title",
            SelectorStrategy.text("Prijedlozi pretrage"),
        )
        self.login_link = self.smart_locator(
            "login_link",
            SelectorStrategy.css('a[aria-label="prijava"]'),
            SelectorStrategy.role("link", "prijava"),
            SelectorStrategy.css('a[href*="/login"]'),
            SelectorStrategy.css('a[href*="/prijava"]'),
        )
        self.email_input = self.smart_locator(
            "email_input",
            SelectorStrategy.css('input[name="username"]'),
        )
        self.password_input = self.smart_locator(
            "password_input",
            SelectorStrategy.css('input[name="password"]'),
        )
        self.login_submit = self.smart_locator(
            "login_submit",
            SelectorStrategy.css('button:has(p:text("Prijavi se"))'),
            SelectorStrategy.css("button", has_text="Prijavi se"),
            SelectorStrategy.css('button[type="submit"]'),
        )
        self.login_heading = self.smart_locator(
            "login_heading",
            SelectorStrategy.css("h1, h2", has_text=re.compile("prijavite se|prijava", re.IGNORECASE)),
        )
        self.user_menu = self.smart_locator(
            "user_menu",
            SelectorStrategy.css(".user-menu-label"),
        )
        self.listing_cards = self.smart_locator(
            "listing_cards",
            SelectorStrategy.css('a[href*="/artikal/"]'),
        )
        self.page_heading = self.smart_locator(
            "page_heading",
            SelectorStrategy.css("h1"),
        )

    @allure.step("Open home page")
    async def open(self) -> "HomePage":
        """Navigate to the home page and wait for network idle."""
        await self.navigate(wait_for="networkidle")
        return self

    @allure.step("Handle cookie consent")
    async def handle_cookie_consent(self) -> ConsentOutcome:
        """
        Accept the cookie consent overlay if it shows up.

        A consent overlay that never appears is not an error. Once accepted,
        the overlay must be hidden before returning: a visible overlay still
        intercepts later clicks.
        """
        button = await wait_visible_optional(
            self.accept_cookies_button, self.timeouts.consent_visible_ms
        )
        if button is None:
            logger.info("Cookie consent modal did not appear this time")
            return ConsentOutcome.NOT_PRESENT

        await self.coordinator.act_with_expectation(
            lambda: self.driver.click(self.accept_cookies_button),
            hidden_condition(self.accept_cookies_button, self.timeouts.consent_hidden_ms),
            step="handle_cookie_consent",
        )
        await self.driver.human_delay()
        return ConsentOutcome.ACCEPTED

    @allure.step("Open login page")
    async def open_login_page(self) -> str:
        """Click the login entry point and wait for the login route."""
        return await self.coordinator.click_and_expect_url(
            self.login_link,
            url_matches(LOGIN_ROUTE),
            self.timeouts.login_route_ms,
            step="open_login_page",
        )

    @allure.step("Login (email={email})")
    async def login(self, email: str, password: str) -> None:
        """
        Log in and wait for the redirect back to the site origin.

        Raises:
            AuthFailedError: When the origin is never reached after submit
        """
        await self.open_login_page()

        await self.driver.fill(self.email_input, email)
        await self.driver.fill(self.password_input, password, secret=True)
        await self.driver.human_delay()

        try:
            await self.coordinator.click_and_expect_url(
                self.login_submit,
                url_equals(self.settings.origin),
                self.timeouts.login_submit_ms,
                step="login",
            )
        except WaitTimeoutError as exc:
            raise AuthFailedError.from_error("login", exc) from exc
        logger.info(f"Logged in as {email}")

    async def is_logged_in(self) -> bool:
        """True once the login entry point is no longer visible."""
        return not await self.login_link.is_visible()

    @allure.step("Type search keyword: {keyword}")
    async def type_search_keyword(self, keyword: str) -> None:
        """Type into the search box without submitting (triggers suggestions)."""
        await self.driver.type_text(self.search_input, keyword)

    @allure.step("Search for: {keyword}")
    async def search_for(self, keyword: str) -> str:
        """
        Type the keyword with human pacing and submit with Enter.

        The new results URL must differ from the one the search started on,
        so a search launched from a results page waits for the new listing.

        Returns:
            The search result URL
        """
        snapshot = self.page.url
        await self.type_search_keyword(keyword)
        return await self.coordinator.press_and_expect_url(
            "Enter",
            url_all(url_changed_from(snapshot), url_matches(SEARCH_RESULT_MARKER)),
            self.timeouts.search_url_ms,
            step="search",
        )

    @allure.step("Read search suggestions")
    async def get_search_suggestions(self) -> List[str]:
        """Wait for the suggestion dropdown and return the suggestion texts."""
        await wait_visible(self.suggestions_title, self.timeouts.suggestions_ms)
        rows = await wait_visible(self.suggestion_rows, self.timeouts.suggestions_ms)
        return [text.strip() for text in await rows.all_text_contents()]

    @allure.step("Select category: {category_name}")
    async def select_category(self, category_name: str) -> str:
        """Open a category from the home page; returns the category URL."""
        category_link = SmartLocator(
            self.page,
            f"category_link[{category_name}]",
            [SelectorStrategy.css("a", has_text=category_name)],
        )
        return await self.coordinator.click_and_expect_url(
            category_link,
            url_changed_from(self.page.url),
            self.timeouts.category_ms,
            step="select_category",
        )

    @allure.step("Click 'Post ad'")
    async def click_post_ad(self) -> str:
        """Guests are redirected to the login route; returns that URL."""
        return await self.coordinator.click_and_expect_url(
            self.post_ad_button,
            url_matches(LOGIN_ROUTE),
            self.timeouts.login_route_ms,
            step="click_post_ad",
        )

    @allure.step("Open first listing")
    async def open_first_listing(self) -> str:
        """
        Open the first listing card on the page.

        Returns:
            Text of the card that was opened
        """
        cards = await wait_visible(self.listing_cards, self.timeouts.results_ms)
        title = (await cards.first.text_content() or "").strip()
        await self.coordinator.click_and_expect_url(
            self.listing_cards,
            url_matches(LISTING_ROUTE),
            self.timeouts.results_ms,
            step="open_first_listing",
        )
        return title

    async def heading_text(self) -> Optional[str]:
        """Text of the first <h1> on the page."""
        heading = await wait_visible(self.page_heading, self.settings.action_timeout_ms)
        return await heading.first.text_content()


__all__ = [
    "HomePage",
    "ConsentOutcome",
    "SEARCH_RESULT_MARKER",
    "LOGIN_ROUTE",
]
