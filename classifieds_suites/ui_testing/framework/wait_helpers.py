# ================================================================================
# Wait Helpers Module
# ================================================================================
#
# Synchronization primitives for UI workflows. Every wait is bounded by its own
# per-call timeout; a workflow chaining several waits accumulates them.
#
# Key Features:
#   - wait_visible / wait_hidden over SmartLocator candidates
#   - wait_url over exact strings, regex patterns or predicates
#   - wait_network_idle / wait_load_state
#   - WaitCondition: a monotonic, reusable description of a wait
#   - Playwright timeouts surfaced as WaitTimeoutError with observed state
#
# Usage:
#   await wait_visible(home.search_input, timeout_ms=5000)
#   await wait_url(page, url_contains("state=1"), timeout_ms=15000)
#   condition = url_condition(page, url_changed_from(page.url), 10000)
#
# ================================================================================

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Pattern, Union
from urllib.parse import unquote_plus

from loguru import logger
from playwright.async_api import Locator, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .exceptions import WaitTimeoutError
from .smart_locator import SmartLocator


# ================================================================================
# URL Predicates
# ================================================================================

@dataclass(frozen=True)
class UrlPredicate:
    """
    A named predicate over the current page URL.

    Instances are callables accepted directly by Playwright's wait_for_url.
    """
    check: Callable[[str], bool]
    description: str

    def __call__(self, url: str) -> bool:
        return bool(self.check(url))

    def __str__(self) -> str:
        return self.description


UrlExpectation = Union[str, Pattern[str], Callable[[str], bool], UrlPredicate]


def _normalize(url: str) -> str:
    return url.rstrip("/")


def url_equals(expected: str) -> UrlPredicate:
    """Exact URL match, ignoring a trailing slash."""
    target = _normalize(expected)
    return UrlPredicate(lambda url: _normalize(url) == target, f"URL equal to {expected}")


def url_contains(*fragments: str, decode: bool = True) -> UrlPredicate:
    """URL containing every fragment (compared against the decoded URL too)."""
    def check(url: str) -> bool:
        candidates = [url, unquote_plus(url)] if decode else [url]
        return any(all(fragment in candidate for fragment in fragments) for candidate in candidates)

    joined = " and ".join(repr(fragment) for fragment in fragments)
    return UrlPredicate(check, f"URL containing {joined}")


def url_matches(pattern: Union[str, Pattern[str]]) -> UrlPredicate:
    """URL in which the regular expression can be found."""
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return UrlPredicate(lambda url: compiled.search(url) is not None, f"URL matching /{compiled.pattern}/")


def url_changed_from(snapshot: str) -> UrlPredicate:
    """URL different from a snapshot taken before the action."""
    return UrlPredicate(lambda url: url != snapshot, f"URL changed from {snapshot}")


def url_query_value(value: str, name_pattern: str = r"[^=&#]*") -> UrlPredicate:
    """URL carrying `value` as the complete value of a query parameter."""
    compiled = re.compile(rf"[?&]{name_pattern}={re.escape(value)}(&|#|$)")
    return UrlPredicate(
        lambda url: compiled.search(url) is not None,
        f"URL with a query parameter equal to {value!r}",
    )


def url_all(*predicates: UrlPredicate) -> UrlPredicate:
    """Conjunction of URL predicates."""
    return UrlPredicate(
        lambda url: all(predicate(url) for predicate in predicates),
        " and ".join(predicate.description for predicate in predicates),
    )


def to_url_predicate(expected: UrlExpectation) -> UrlPredicate:
    """
    Normalise the accepted URL expectation forms.

    Plain strings are compared for equality rather than treated as globs.
    """
    if isinstance(expected, UrlPredicate):
        return expected
    if isinstance(expected, str):
        return url_equals(expected)
    if isinstance(expected, re.Pattern):
        return url_matches(expected)
    if callable(expected):
        name = getattr(expected, "__name__", "predicate")
        return UrlPredicate(expected, f"URL satisfying {name}")
    raise TypeError(f"Unsupported URL expectation: {expected!r}")


# ================================================================================
# Primitives
# ================================================================================

def _timeout_error(step: str, expected: str, observed: Optional[str], timeout_ms: int) -> WaitTimeoutError:
    error = WaitTimeoutError(step=step, expected=expected, observed=observed, timeout_ms=timeout_ms)
    logger.warning(f"Condition not observed: {error}")
    return error


async def wait_visible(target: SmartLocator, timeout_ms: int) -> Locator:
    """
    Wait until the element is attached and visible.

    While no candidate strategy matches, waits for any candidate to attach
    and then re-resolves, so priority between strategies is kept.

    Returns:
        The resolved Locator

    Raises:
        WaitTimeoutError: When the element is not visible within timeout_ms
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000

    while True:
        remaining = int((deadline - loop.time()) * 1000)
        if remaining <= 0:
            raise _timeout_error(f"wait_visible {target.name}", f"'{target.name}' visible", "not attached", timeout_ms)
        resolved = await target.resolve()
        try:
            if resolved is None:
                await target.any_candidate().first.wait_for(state="attached", timeout=remaining)
                continue
            await resolved.first.wait_for(state="visible", timeout=remaining)
            return resolved
        except PlaywrightTimeoutError as exc:
            observed = "not attached" if resolved is None else "attached but hidden"
            raise _timeout_error(
                f"wait_visible {target.name}", f"'{target.name}' visible", observed, timeout_ms
            ) from exc


async def wait_visible_optional(target: SmartLocator, timeout_ms: int) -> Optional[Locator]:
    """
    Wait for an element that may legitimately never appear.

    Returns:
        The resolved Locator, or None when it did not become visible in time
    """
    try:
        return await wait_visible(target, timeout_ms)
    except WaitTimeoutError:
        logger.info(f"Optional element '{target.name}' not shown within {timeout_ms}ms")
        return None


async def wait_hidden(target: SmartLocator, timeout_ms: int) -> None:
    """
    Wait until the element is detached or hidden.

    Raises:
        WaitTimeoutError: When the element is still visible after timeout_ms
    """
    resolved = await target.resolve()
    if resolved is None:
        return
    try:
        await resolved.first.wait_for(state="hidden", timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise _timeout_error(
            f"wait_hidden {target.name}", f"'{target.name}' hidden", "still visible", timeout_ms
        ) from exc


async def wait_url(
    page: Page,
    expected: UrlExpectation,
    timeout_ms: int,
    wait_until: str = "load",
) -> str:
    """
    Wait until the page URL satisfies the expectation.

    Args:
        page: Playwright Page object
        expected: Exact URL string, compiled regex or predicate
        timeout_ms: Timeout in milliseconds
        wait_until: Load state the navigation must reach

    Returns:
        The URL that satisfied the expectation
    """
    predicate = to_url_predicate(expected)
    try:
        await page.wait_for_url(predicate, timeout=timeout_ms, wait_until=wait_until)
    except PlaywrightTimeoutError as exc:
        raise _timeout_error("wait_url", predicate.description, page.url, timeout_ms) from exc
    return page.url


async def wait_load_state(page: Page, state: str, timeout_ms: int) -> None:
    """Wait for a Playwright load state ('load', 'domcontentloaded', 'networkidle')."""
    try:
        await page.wait_for_load_state(state, timeout=timeout_ms)
    except PlaywrightTimeoutError as exc:
        raise _timeout_error(f"wait_load_state {state}", f"load state '{state}'", page.url, timeout_ms) from exc


async def wait_network_idle(page: Page, timeout_ms: int) -> None:
    """Wait until no network activity has been seen for the quiescence window."""
    await wait_load_state(page, "networkidle", timeout_ms)


# ================================================================================
# Wait Conditions
# ================================================================================

@dataclass
class WaitCondition:
    """
    A timed predicate over page state.

    Conditions are monotonic: once satisfied, wait() returns the cached
    result without re-checking.

    Attributes:
        description: Human-readable expectation used in logs and errors
        timeout_ms: Default timeout for wait()
        waiter: Coroutine factory receiving the effective timeout
    """
    description: str
    timeout_ms: int
    waiter: Callable[[int], Awaitable[Any]]
    satisfied: bool = False
    result: Any = field(default=None, repr=False)

    async def wait(self, timeout_ms: Optional[int] = None) -> Any:
        if self.satisfied:
            return self.result
        self.result = await self.waiter(timeout_ms or self.timeout_ms)
        self.satisfied = True
        return self.result


def visible_condition(target: SmartLocator, timeout_ms: int) -> WaitCondition:
    return WaitCondition(
        description=f"'{target.name}' visible",
        timeout_ms=timeout_ms,
        waiter=lambda timeout: wait_visible(target, timeout),
    )


def hidden_condition(target: SmartLocator, timeout_ms: int) -> WaitCondition:
    return WaitCondition(
        description=f"'{target.name}' hidden",
        timeout_ms=timeout_ms,
        waiter=lambda timeout: wait_hidden(target, timeout),
    )


def url_condition(
    page: Page,
    expected: UrlExpectation,
    timeout_ms: int,
    wait_until: str = "load",
) -> WaitCondition:
    predicate = to_url_predicate(expected)
    return WaitCondition(
        description=predicate.description,
        timeout_ms=timeout_ms,
        waiter=lambda timeout: wait_url(page, predicate, timeout, wait_until=wait_until),
    )


def network_idle_condition(page: Page, timeout_ms: int) -> WaitCondition:
    return WaitCondition(
        description="network idle",
        timeout_ms=timeout_ms,
        waiter=lambda timeout: wait_network_idle(page, timeout),
    )


__all__ = [
    "UrlPredicate",
    "UrlExpectation",
    "url_equals",
    "url_contains",
    "url_matches",
    "url_changed_from",
    "url_query_value",
    "url_all",
    "to_url_predicate",
    "wait_visible",
    "wait_visible_optional",
    "wait_hidden",
    "wait_url",
    "wait_load_state",
    "wait_network_idle",
    "WaitCondition",
    "visible_condition",
    "hidden_condition",
    "url_condition",
    "network_idle_condition",
    "WaitTimeoutError",
]
