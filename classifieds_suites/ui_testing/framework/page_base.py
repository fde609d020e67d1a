"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation.

Provides:
    - Locator declaration (SmartLocator with prioritised strategies)
    - Paced input and action/expectation pairing
    - Navigation and load-state waits
    - Screenshot and failure capture for Allure
    - API response capture

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
import random
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import allure
from loguru import logger
from playwright.async_api import Page, Response

from .action_coordinator import ActionCoordinator
from .paced_input import PacedInputDriver
from .settings import UiSettings
from .smart_locator import ResolveMode, SelectorStrategy, SmartLocator, build_health_report
from .wait_helpers import wait_load_state


# Default output directory for screenshots
SCREENSHOT_DIR = Path(__file__).resolve().parents[3] / "reports" / "screenshots"


class BasePage:
    """
    Base class for all page objects.

    A page object borrows the Playwright page from the test session; it
    never closes it and must not outlive it.

    Usage:
        class HomePage(BasePage):
            URL_PATH = "/"

            def __init__(self, page, settings=None):
                super().__init__(page, settings)
                self.search_input = self.smart_locator(
                    "search_input",
                    SelectorStrategy.css("input[name='notASearchField']"),
                )
    """

    # Override in subclasses
    URL_PATH: str = "/"
    PAGE_TITLE: str = ""

    def __init__(
        self,
        page: Page,
        settings: Optional[UiSettings] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object
            settings: UI settings (defaults to UiSettings.from_config())
            rng: Random source for input pacing
        """
        self.page = page
        self.settings = settings or UiSettings.from_config()
        self.base_url = self.settings.base_url.rstrip("/")
        self.timeouts = self.settings.timeouts
        self.driver = PacedInputDriver(
            page,
            self.settings.pacing,
            default_timeout=self.settings.action_timeout_ms,
            rng=rng,
        )
        self.coordinator = ActionCoordinator(page, self.driver)
        self._locators: List[SmartLocator] = []

        # API response capture
        self._captured_requests: List[Dict[str, Any]] = []
        self._setup_request_capture()

    def _setup_request_capture(self) -> None:
        """Set up API response capture for debugging."""

        async def capture_response(response: Response) -> None:
            if "/api/" in response.url:
                try:
                    body = await response.text()
                except Exception:
                    body = "<unable to read>"

                self._captured_requests.append({
                    "timestamp": datetime.now().isoformat(),
                    "url": response.url,
                    "status": response.status,
                    "body": body[:1000],
                })

                # Keep only last 20 requests
                if len(self._captured_requests) > 20:
                    self._captured_requests.pop(0)

        self.page.on("response", capture_response)

    def smart_locator(
        self,
        name: str,
        *strategies: SelectorStrategy,
        mode: ResolveMode = ResolveMode.FIRST_OF,
    ) -> SmartLocator:
        """
        Declare an element of this page.

        Args:
            name: Logical element name for logs and errors
            *strategies: Candidate strategies in priority order
            mode: FIRST_OF (priority) or ANY_OF (union)

        Returns:
            SmartLocator owned by this page object
        """
        locator = SmartLocator(self.page, name, strategies, mode=mode)
        self._locators.append(locator)
        return locator

    @property
    def url(self) -> str:
        """Get full page URL."""
        return f"{self.base_url}{self.URL_PATH}"

    @property
    def current_url(self) -> str:
        return self.page.url

    async def navigate(self, wait_for: str = "networkidle") -> None:
        """
        Navigate to this page.

        Args:
            wait_for: Wait condition - 'load', 'domcontentloaded', 'networkidle'
        """
        await self.navigate_to(self.URL_PATH, wait_for=wait_for)

    async def navigate_to(
        self,
        path: str,
        wait_for: str = "networkidle",
    ) -> None:
        """
        Navigate to specific path.

        Args:
            path: URL path to navigate to
            wait_for: Wait condition
        """
        full_url = f"{self.base_url}{path}"
        with allure.step(f"Navigate to {full_url}"):
            await self.page.goto(
                full_url,
                wait_until=wait_for,
                timeout=self.settings.network_idle_timeout_ms,
            )
            logger.debug(f"Navigated to: {full_url}")

    async def wait_for_page_load(
        self,
        state: str = "networkidle",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for the page to reach a stable load state.

        Args:
            state: Playwright load state ('load', 'domcontentloaded', 'networkidle')
            timeout: Timeout in milliseconds
        """
        await wait_load_state(self.page, state, timeout or self.settings.network_idle_timeout_ms)

    # =========================================================================
    # Screenshot and Debug Utilities
    # =========================================================================

    async def screenshot(
        self,
        name: str,
        full_page: bool = False,
        attach_to_allure: bool = True,
    ) -> Path:
        """
        Take screenshot and optionally attach to Allure.

        Args:
            name: Screenshot name (without extension)
            full_page: Capture full scrollable page
            attach_to_allure: Whether to attach to Allure report

        Returns:
            Path to saved screenshot
        """
        SCREENSHOT_DIR.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = SCREENSHOT_DIR / f"{name}_{timestamp}.png"

        await self.page.screenshot(path=str(filepath), full_page=full_page)

        if attach_to_allure:
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    async def capture_failure(self, test_name: str) -> None:
        """
        Capture debugging information on test failure.

        Saves:
            - Screenshot
            - Current URL
            - Recent API responses
            - Locator health report
        """
        with allure.step("Capture failure details"):
            await self.screenshot(f"failure_{test_name}", full_page=True)

            allure.attach(
                self.page.url,
                name="Current URL",
                attachment_type=allure.attachment_type.TEXT,
            )

            if self._captured_requests:
                allure.attach(
                    json.dumps(self._captured_requests[-10:], indent=2),
                    name="Recent API Requests",
                    attachment_type=allure.attachment_type.JSON,
                )

            allure.attach(
                self.get_locator_health_report(),
                name="Locator Health",
                attachment_type=allure.attachment_type.TEXT,
            )

    def get_locator_health_report(self) -> str:
        """Get smart locator health report for every element of this page."""
        return build_health_report(self._locators)


__all__ = [
    "BasePage",
]
