"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for live scenarios against the marketplace.

Key Features:
- Live scenarios run only with RUN_UI_TESTS=1
- One browser per scenario (function scope), one page per browser
- Home page opened and cookie consent handled before each scenario
- Screenshot, URL and locator health attached to Allure on failure

================================================================================
"""

import os
from typing import AsyncGenerator

import allure
import pytest
from loguru import logger
from playwright.async_api import Page

from classifieds_suites.ui_testing.framework.browser_manager import BrowserManager
from classifieds_suites.ui_testing.framework.page_base import BasePage
from classifieds_suites.ui_testing.framework.settings import UiSettings
from classifieds_suites.ui_testing.pages.home_page import HomePage
from classifieds_suites.ui_testing.pages.search_page import SearchPage


# ================================================================================
# Run Gate
# ================================================================================

@pytest.fixture(autouse=True)
def live_ui_enabled() -> None:
    """Skip live scenarios unless explicitly requested."""
    if os.environ.get("RUN_UI_TESTS") != "1":
        pytest.skip("Live UI scenarios are disabled; set RUN_UI_TESTS=1 to run them")


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def ui_settings() -> UiSettings:
    """Settings shared by every scenario of the session."""
    return UiSettings.from_config()


@pytest.fixture
async def browser_manager(live_ui_enabled, ui_settings: UiSettings) -> AsyncGenerator[BrowserManager, None]:
    """
    Function-scoped browser manager.

    Each scenario gets its own browser so no state leaks between scenarios.
    """
    async with BrowserManager(ui_settings) as manager:
        yield manager


@pytest.fixture
async def page(request, browser_manager: BrowserManager, ui_settings: UiSettings) -> AsyncGenerator[Page, None]:
    """
    Function-scoped page fixture.

    On a failed scenario, captures failure details before the browser closes.
    """
    page = await browser_manager.new_page()
    failure_capture = BasePage(page, ui_settings)
    yield page

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        try:
            await failure_capture.capture_failure(request.node.name)
        except Exception as e:
            logger.warning(f"Failed to capture failure details: {e}")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
async def home_page(page: Page, ui_settings: UiSettings) -> HomePage:
    """
    Home page, opened with cookie consent handled.

    Every scenario starts from this state.
    """
    home = HomePage(page, ui_settings)
    with allure.step("Open home page and handle cookie consent"):
        await home.open()
        await home.handle_cookie_consent()
    return home


@pytest.fixture
def search_page(page: Page, ui_settings: UiSettings) -> SearchPage:
    """Search results page object over the same page (not navigated)."""
    return SearchPage(page, ui_settings)


@pytest.fixture
def credentials(ui_settings: UiSettings) -> dict:
    """Login credentials from UI_USERNAME / UI_PASSWORD."""
    if not ui_settings.has_credentials:
        pytest.skip("UI_USERNAME / UI_PASSWORD not set")
    return {"email": ui_settings.username, "password": ui_settings.password}


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Expose each phase's report on the item (rep_setup, rep_call, ...)."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)
