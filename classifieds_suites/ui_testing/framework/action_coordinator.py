"""
================================================================================
Action Coordinator
================================================================================

Pairs a state-changing action (click, key press, submit) with a wait for the
effect that action causes (URL change, element shown/hidden).

If the wait were registered only after the click returned, a fast
navigation could already have happened and the wait would time out on an
event it never saw. The coordinator therefore:

    1. starts the wait and lets it arm its listeners (one event-loop turn)
    2. issues the action
    3. joins on both, failing fast when the action itself fails

This mirrors Playwright's `async with page.expect_navigation(): ...`
pattern, generalized to any WaitCondition.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

import allure
from loguru import logger
from playwright.async_api import Page

from .exceptions import WaitTimeoutError
from .paced_input import PacedInputDriver
from .smart_locator import SmartLocator
from .wait_helpers import UrlExpectation, WaitCondition, url_condition


Action = Callable[[], Awaitable[Any]]


def _in_step(step: str, error: BaseException) -> BaseException:
    """Relabel a primitive's timeout with the workflow step; other errors pass through."""
    if isinstance(error, WaitTimeoutError):
        relabelled = WaitTimeoutError.from_error(step, error)
        relabelled.__cause__ = error
        return relabelled
    return error


class ActionCoordinator:
    """
    Races an action against the wait for its expected effect.

    Usage:
        coordinator = ActionCoordinator(page, driver)
        await coordinator.act_with_expectation(
            lambda: driver.click(search_page.condition_new),
            url_condition(page, url_contains("state=1"), 15000),
            step="filter_by_condition",
        )
    """

    def __init__(self, page: Page, driver: PacedInputDriver):
        self.page = page
        self.driver = driver

    async def act_with_expectation(
        self,
        action: Action,
        expectation: WaitCondition,
        timeout_ms: Optional[int] = None,
        step: str = "action",
    ) -> Any:
        """
        Run `action` while `expectation` is already being waited for.

        Args:
            action: Zero-argument coroutine factory performing the action
            expectation: Condition that must become true because of the action
            timeout_ms: Overall bound (defaults to the expectation's timeout)
            step: Step name for logs and errors

        Returns:
            The expectation's result

        Raises:
            WaitTimeoutError: When the expectation is not met in time, or the
                action timed out waiting for its target (labelled with `step`)
            Exception: Whatever the action raised, without waiting out the timeout
        """
        timeout_ms = timeout_ms or expectation.timeout_ms

        with allure.step(f"{step}: expect {expectation.description}"):
            wait_task = asyncio.ensure_future(expectation.wait(timeout_ms))
            # Let the wait register its listeners before the action fires.
            await asyncio.sleep(0)
            action_task = asyncio.ensure_future(action())

            pending = {wait_task, action_task}
            loop = asyncio.get_running_loop()
            deadline = loop.time() + timeout_ms / 1000
            try:
                while pending:
                    remaining = deadline - loop.time()
                    if remaining <= 0:
                        break
                    done, pending = await asyncio.wait(
                        pending, timeout=remaining, return_when=asyncio.FIRST_EXCEPTION
                    )
                    if action_task in done and action_task.exception() is not None:
                        error = action_task.exception()
                        logger.error(f"[{step}] action failed: {error}")
                        raise _in_step(step, error)
                    if wait_task in done and wait_task.exception() is not None:
                        raise _in_step(step, wait_task.exception())
            finally:
                for task in pending:
                    task.cancel()
                if pending:
                    await asyncio.gather(*pending, return_exceptions=True)

            if pending:
                error = WaitTimeoutError(
                    step=step,
                    expected=expectation.description,
                    observed=self.page.url,
                    timeout_ms=timeout_ms,
                )
                logger.warning(f"Condition not observed: {error}")
                raise error

            logger.debug(f"[{step}] settled: {expectation.description}")
            return wait_task.result()

    async def click_and_expect_url(
        self,
        target: SmartLocator,
        expected: UrlExpectation,
        timeout_ms: int,
        step: str,
        **click_options: Any,
    ) -> str:
        """Click `target` and wait for the URL it navigates to."""
        return await self.act_with_expectation(
            lambda: self.driver.click(target, **click_options),
            url_condition(self.page, expected, timeout_ms),
            step=step,
        )

    async def press_and_expect_url(
        self,
        key: str,
        expected: UrlExpectation,
        timeout_ms: int,
        step: str,
    ) -> str:
        """Press `key` and wait for the URL it navigates to."""
        return await self.act_with_expectation(
            lambda: self.driver.press_key(key),
            url_condition(self.page, expected, timeout_ms),
            step=step,
        )


__all__ = [
    "Action",
    "ActionCoordinator",
]
