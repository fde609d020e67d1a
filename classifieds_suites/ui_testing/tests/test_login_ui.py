"""
================================================================================
Authentication UI Tests (Async / Playwright)
================================================================================

Login navigation, guest redirect from "Post ad" and a real login.

The login scenario needs UI_USERNAME / UI_PASSWORD in the environment and
is skipped otherwise. Credentials are never stored in the repository.

================================================================================
"""

import allure
import pytest

from classifieds_suites.ui_testing.framework.wait_helpers import wait_visible
from classifieds_suites.ui_testing.pages.home_page import HomePage, LOGIN_ROUTE


@allure.epic("UI Testing")
@allure.feature("Authentication")
class TestLogin:
    """Login UI suite (async)."""

    @allure.story("Navigation")
    @allure.title("Login page opens with the login form")
    @allure.severity(allure.severity_level.CRITICAL)
    @pytest.mark.P1
    @pytest.mark.functional
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_login_page_navigation(self, home_page: HomePage):
        url = await home_page.open_login_page()

        assert LOGIN_ROUTE.search(url)
        await wait_visible(home_page.email_input, home_page.settings.action_timeout_ms)

    @allure.story("Guest Redirect")
    @allure.title("'Post ad' redirects a guest to the login page")
    @allure.severity(allure.severity_level.NORMAL)
    @pytest.mark.P2
    @pytest.mark.functional
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_post_ad_redirects_guest(self, home_page: HomePage):
        button = await wait_visible(home_page.post_ad_button, home_page.timeouts.login_route_ms)
        assert "Objavi oglas" in (await button.first.text_content() or "")

        url = await home_page.click_post_ad()

        assert LOGIN_ROUTE.search(url)
        await wait_visible(home_page.login_heading, home_page.settings.action_timeout_ms)

    @allure.story("Happy Path")
    @allure.title("Login with valid credentials returns to the home page")
    @allure.severity(allure.severity_level.BLOCKER)
    @pytest.mark.P0
    @pytest.mark.functional
    @pytest.mark.auth
    @pytest.mark.asyncio
    async def test_login_success(self, home_page: HomePage, credentials: dict):
        await home_page.login(credentials["email"], credentials["password"])

        assert home_page.current_url.rstrip("/") == home_page.settings.origin.rstrip("/")
        assert await home_page.is_logged_in()
