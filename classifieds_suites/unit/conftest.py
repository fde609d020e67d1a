"""
================================================================================
Unit Test Configuration
================================================================================

Browser-free doubles of the Playwright Page / Locator API.

FakePage keeps a tiny "DOM": selector keys mapped to FakeElement lists. It
supports the subset of the async API used by the interaction layer:
locate, filter, or_, count, wait_for, click, fill, press_sequentially,
keyboard.press, wait_for_url and wait_for_load_state. Clicks and key presses
can trigger scripted effects (navigation, hiding an overlay) after a delay.

================================================================================
"""

from __future__ import annotations

import asyncio
import random
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from classifieds_suites.ui_testing.framework.config_loader import ConfigLoader
from classifieds_suites.ui_testing.framework.paced_input import PacingConfig
from classifieds_suites.ui_testing.framework.settings import StepTimeouts, UiSettings


POLL_INTERVAL = 0.005


def _text_matches(text: str, expected: Any) -> bool:
    if isinstance(expected, re.Pattern):
        return expected.search(text) is not None
    return str(expected).lower() in text.lower()


class FakeElement:
    """One element of the fake DOM."""

    def __init__(
        self,
        text: str = "",
        visible: bool = True,
        on_click: Optional[Callable[["FakePage"], Any]] = None,
    ):
        self.text = text
        self.visible = visible
        self.attached = True
        self.on_click = on_click
        self.value = ""
        self.clicks = 0


class FakeKeyboard:
    def __init__(self, page: "FakePage"):
        self.page = page
        self.pressed: List[str] = []

    async def press(self, key: str) -> None:
        self.pressed.append(key)
        self.page.log.append(("press", key))
        handler = self.page.key_handlers.get(key)
        if handler:
            handler(self.page)


class FakeLocator:
    """Lazy query over the fake DOM, mirroring Playwright's Locator."""

    def __init__(
        self,
        page: "FakePage",
        selector: Optional[str] = None,
        has_text: Any = None,
        parts: Optional[List["FakeLocator"]] = None,
        index: Optional[int] = None,
    ):
        self.page = page
        self.selector = selector
        self.has_text = has_text
        self.parts = parts
        self.index = index

    def _matches(self) -> List[FakeElement]:
        if self.parts is not None:
            found: List[FakeElement] = []
            for part in self.parts:
                for element in part._matches():
                    if element not in found:
                        found.append(element)
        else:
            found = [el for el in self.page.elements.get(self.selector, []) if el.attached]
            if self.has_text is not None:
                found = [el for el in found if _text_matches(el.text, self.has_text)]
        if self.index is not None:
            return found[self.index:self.index + 1]
        return found

    def _target(self) -> Optional[FakeElement]:
        matches = self._matches()
        return matches[0] if matches else None

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, self.has_text, self.parts, index=0)

    def filter(self, has_text: Any = None) -> "FakeLocator":
        return FakeLocator(self.page, self.selector, has_text=has_text, parts=self.parts)

    def or_(self, other: "FakeLocator") -> "FakeLocator":
        return FakeLocator(self.page, parts=[self, other])

    async def count(self) -> int:
        return len(self._matches())

    def _in_state(self, state: str) -> bool:
        target = self._target()
        if state == "attached":
            return target is not None
        if state == "detached":
            return target is None
        if state == "visible":
            return target is not None and target.visible
        if state == "hidden":
            return target is None or not target.visible
        raise ValueError(state)

    async def wait_for(self, state: str = "visible", timeout: Optional[float] = None) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + (timeout or 0) / 1000
        while not self._in_state(state):
            if loop.time() >= deadline:
                raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {state}")
            await asyncio.sleep(POLL_INTERVAL)

    async def is_visible(self) -> bool:
        return self._in_state("visible")

    async def click(self, timeout: Optional[float] = None, force: bool = False, **kwargs: Any) -> None:
        target = self._target()
        if target is None or (not target.visible and not force):
            raise PlaywrightTimeoutError(f"Element {self.selector} is not clickable")
        target.clicks += 1
        self.page.log.append(("click", self.selector))
        if target.on_click:
            target.on_click(self.page)

    async def fill(self, value: str, timeout: Optional[float] = None) -> None:
        target = self._target()
        if target is None:
            raise PlaywrightTimeoutError(f"Element {self.selector} not found")
        target.value = value
        self.page.log.append(("fill", self.selector))

    async def press_sequentially(self, text: str, delay: float = 0) -> None:
        target = self._target()
        if target is None:
            raise PlaywrightTimeoutError(f"Element {self.selector} not found")
        loop = asyncio.get_running_loop()
        for char in text:
            target.value += char
            self.page.keystrokes.append((char, loop.time()))

    async def text_content(self) -> Optional[str]:
        target = self._target()
        return target.text if target else None

    async def all_text_contents(self) -> List[str]:
        return [element.text for element in self._matches()]


class FakePage:
    """In-memory page with scripted navigation."""

    def __init__(self, url: str = "https://olx.ba/"):
        self.url = url
        self.elements: Dict[str, List[FakeElement]] = {}
        self.keyboard = FakeKeyboard(self)
        self.key_handlers: Dict[str, Callable[["FakePage"], Any]] = {}
        self.keystrokes: List[Tuple[str, float]] = []
        self.log: List[Tuple[str, Any]] = []
        self.listeners: Dict[str, List[Callable[..., Any]]] = {}
        self.network_busy = False

    # -- DOM scripting ---------------------------------------------------------

    def add(self, selector: str, **kwargs: Any) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def add_later(self, selector: str, delay: float, **kwargs: Any) -> None:
        asyncio.get_running_loop().call_later(delay, lambda: self.add(selector, **kwargs))

    def _set_visible(self, selector: str, visible: bool) -> None:
        for element in self.elements.get(selector, []):
            element.visible = visible

    def hide(self, selector: str, delay: float = 0) -> None:
        if delay:
            asyncio.get_running_loop().call_later(delay, self._set_visible, selector, False)
        else:
            self._set_visible(selector, False)

    def navigate(self, url: str, delay: float = 0) -> None:
        if delay:
            asyncio.get_running_loop().call_later(delay, self._commit_navigation, url)
        else:
            self._commit_navigation(url)

    def _commit_navigation(self, url: str) -> None:
        self.url = url
        self.log.append(("navigated", url))
        self.emit("framenavigated", url)

    # -- events ----------------------------------------------------------------

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self.listeners.get(event, [])):
            handler(*args)

    # -- Playwright API subset -------------------------------------------------

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)

    def get_by_role(self, role: str, name: Optional[str] = None, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, f"role={role}[name={name}]")

    def get_by_text(self, text: str, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, f"text={text}")

    def get_by_alt_text(self, text: str, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, f"alt={text}")

    def get_by_placeholder(self, text: str, exact: bool = False) -> FakeLocator:
        return FakeLocator(self, f"placeholder={text}")

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self._commit_navigation(url)

    async def wait_for_url(self, url: Any, timeout: Optional[float] = None, wait_until: Optional[str] = None) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + (timeout or 0) / 1000
        while not url(self.url):
            if loop.time() >= deadline:
                raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for URL")
            await asyncio.sleep(POLL_INTERVAL)

    async def wait_for_load_state(self, state: str = "load", timeout: Optional[float] = None) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + (timeout or 0) / 1000
        while self.network_busy and state == "networkidle":
            if loop.time() >= deadline:
                raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {state}")
            await asyncio.sleep(POLL_INTERVAL)


# ================================================================================
# Fixtures
# ================================================================================

@pytest.fixture
def fake_page() -> FakePage:
    """A fresh fake page positioned on the site origin."""
    return FakePage()


@pytest.fixture
def fast_settings() -> UiSettings:
    """Settings with short timeouts and near-zero pacing for unit tests."""
    timeouts = StepTimeouts(**{name: 300 for name in StepTimeouts.__dataclass_fields__})
    return UiSettings(
        base_url="https://olx.ba",
        action_timeout_ms=300,
        network_idle_timeout_ms=300,
        pacing=PacingConfig(key_delay_min_ms=1, key_delay_max_ms=2, pause_min_ms=0, pause_max_ms=1),
        timeouts=timeouts,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def reset_config():
    """Reset the ConfigLoader singleton before and after a test."""
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
