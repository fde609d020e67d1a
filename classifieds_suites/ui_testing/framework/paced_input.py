"""
================================================================================
Paced Input Driver
================================================================================

Human-like text entry and clicking.

The target site runs anti-automation heuristics that flag uniform,
superhuman typing cadence. This driver types one character at a time with a
delay sampled independently per keystroke, and can insert randomized
"thinking" pauses between logical steps.

Pacing is tunable through configuration (`ui.pacing.*`).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, List, Optional

import allure
from loguru import logger
from playwright.async_api import Locator, Page

from .smart_locator import SmartLocator
from .wait_helpers import wait_visible


@dataclass(frozen=True)
class PacingConfig:
    """
    Delay bounds for paced input.

    Attributes:
        key_delay_min_ms: Lower bound of the per-keystroke delay (> 0)
        key_delay_max_ms: Upper bound of the per-keystroke delay
        pause_min_ms: Lower bound of a thinking pause
        pause_max_ms: Upper bound of a thinking pause
    """
    key_delay_min_ms: float = 100
    key_delay_max_ms: float = 200
    pause_min_ms: float = 400
    pause_max_ms: float = 1200

    def __post_init__(self) -> None:
        if self.key_delay_min_ms <= 0:
            raise ValueError("key_delay_min_ms must be positive")
        if self.key_delay_min_ms > self.key_delay_max_ms:
            raise ValueError("key_delay_min_ms must not exceed key_delay_max_ms")
        if self.pause_min_ms < 0 or self.pause_min_ms > self.pause_max_ms:
            raise ValueError("pause bounds must satisfy 0 <= pause_min_ms <= pause_max_ms")


class PacedInputDriver:
    """
    Performs clicks and keystrokes with human-like timing.

    Example:
        driver = PacedInputDriver(page, PacingConfig(), default_timeout=5000)
        await driver.type_text(home.search_input, "iphone")
        await driver.human_delay()
        await driver.click(home.login_link)
    """

    def __init__(
        self,
        page: Page,
        pacing: Optional[PacingConfig] = None,
        default_timeout: int = 5000,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            page: Playwright Page object
            pacing: Delay bounds (defaults to PacingConfig())
            default_timeout: Visibility timeout before acting, in milliseconds
            rng: Random source, injectable for deterministic tests
        """
        self.page = page
        self.pacing = pacing or PacingConfig()
        self.default_timeout = default_timeout
        self._rng = rng or random.Random()

    def sample_key_delay(self) -> float:
        return self._rng.uniform(self.pacing.key_delay_min_ms, self.pacing.key_delay_max_ms)

    async def human_delay(self) -> float:
        """Pause for a randomized thinking interval; returns the pause in ms."""
        pause = self._rng.uniform(self.pacing.pause_min_ms, self.pacing.pause_max_ms)
        logger.debug(f"Thinking pause: {pause:.0f}ms")
        await asyncio.sleep(pause / 1000)
        return pause

    async def type_text(
        self,
        target: SmartLocator,
        text: str,
        timeout: Optional[int] = None,
    ) -> List[float]:
        """
        Type text character by character.

        Each keystroke is preceded by its own sampled delay, so total elapsed
        time is at least len(text) * key_delay_min_ms.

        Returns:
            The delays (ms) used before each keystroke
        """
        timeout = timeout or self.default_timeout
        with allure.step(f"Type into {target.name}: {text}"):
            locator = (await wait_visible(target, timeout)).first
            await locator.click(timeout=timeout)

            delays: List[float] = []
            for char in text:
                delay = self.sample_key_delay()
                await asyncio.sleep(delay / 1000)
                await locator.press_sequentially(char)
                delays.append(delay)

            logger.debug(
                f"Typed {len(text)} chars into '{target.name}' "
                f"(total delay {sum(delays):.0f}ms)"
            )
            return delays

    async def fill(
        self,
        target: SmartLocator,
        value: str,
        timeout: Optional[int] = None,
        secret: bool = False,
    ) -> None:
        """Fill an input in one go (no pacing)."""
        timeout = timeout or self.default_timeout
        shown = "*" * len(value) if secret else value
        with allure.step(f"Fill {target.name}: {shown}"):
            locator = (await wait_visible(target, timeout)).first
            await locator.fill(value, timeout=timeout)

    async def click(
        self,
        target: SmartLocator,
        timeout: Optional[int] = None,
        force: bool = False,
        **kwargs: Any,
    ) -> Locator:
        """
        Click the resolved element once it is visible.

        `force=True` bypasses Playwright's actionability checks. It can hide
        an overlay that was never dismissed, so each use is logged.
        """
        timeout = timeout or self.default_timeout
        with allure.step(f"Click: {target.name}"):
            locator = (await wait_visible(target, timeout)).first
            if force:
                logger.warning(f"Forced click on '{target.name}' bypasses actionability checks")
            await locator.click(timeout=timeout, force=force, **kwargs)
            return locator

    async def press_key(self, key: str) -> None:
        """Press a keyboard key on the focused element."""
        await self.page.keyboard.press(key)
        logger.debug(f"Pressed key: {key}")


__all__ = [
    "PacingConfig",
    "PacedInputDriver",
]
