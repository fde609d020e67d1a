"""
================================================================================
Smart Locator with Prioritised Selector Strategies
================================================================================

Resolves a logical element name to a Playwright Locator:
    - An ordered list of selector strategies per element
    - "first-of" resolution: the first strategy that matches wins
    - "any-of" resolution: union of every strategy that matches
    - Lazy evaluation: matching is re-done on every call
    - Fallback usage analytics for locator maintenance

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Dict, List, Optional, Pattern, Sequence, Union

from loguru import logger
from playwright.async_api import Locator, Page

from .exceptions import ElementNotFoundError


class ResolveMode(str, Enum):
    """How the candidate list of a SmartLocator is evaluated."""

    FIRST_OF = "first_of"
    ANY_OF = "any_of"


@dataclass(frozen=True)
class SelectorStrategy:
    """
    One way of finding an element.

    Attributes:
        kind: Strategy tag - 'css', 'role', 'text', 'alt_text', 'placeholder'
        value: Selector string, ARIA role, or text depending on `kind`
        name: Accessible name (role strategies only)
        has_text: Optional text filter applied on top of a css selector
        exact: Exact text matching for text-based strategies
    """

    kind: str
    value: str
    name: Optional[str] = None
    has_text: Optional[Union[str, Pattern[str]]] = None
    exact: bool = False

    @classmethod
    def css(cls, selector: str, has_text: Optional[Union[str, Pattern[str]]] = None) -> "SelectorStrategy":
        return cls(kind="css", value=selector, has_text=has_text)

    @classmethod
    def role(cls, role: str, name: str, exact: bool = False) -> "SelectorStrategy":
        return cls(kind="role", value=role, name=name, exact=exact)

    @classmethod
    def text(cls, text: str, exact: bool = False) -> "SelectorStrategy":
        return cls(kind="text", value=text, exact=exact)

    @classmethod
    def alt_text(cls, text: str, exact: bool = False) -> "SelectorStrategy":
        return cls(kind="alt_text", value=text, exact=exact)

    @classmethod
    def placeholder(cls, text: str, exact: bool = False) -> "SelectorStrategy":
        return cls(kind="placeholder", value=text, exact=exact)

    def build(self, page: Page) -> Locator:
        """Turn the strategy into a (not yet evaluated) Playwright Locator."""
        if self.kind == "css":
            locator = page.locator(self.value)
            if self.has_text is not None:
                locator = locator.filter(has_text=self.has_text)
            return locator
        if self.kind == "role":
            return page.get_by_role(self.value, name=self.name, exact=self.exact)
        if self.kind == "text":
            return page.get_by_text(self.value, exact=self.exact)
        if self.kind == "alt_text":
            return page.get_by_alt_text(self.value, exact=self.exact)
        if self.kind == "placeholder":
            return page.get_by_placeholder(self.value, exact=self.exact)
        raise ValueError(f"Unknown selector strategy kind: {self.kind}")

    def describe(self) -> str:
        if self.kind == "role":
            return f"role={self.value}[name={self.name!r}]"
        if self.has_text is not None:
            return f"{self.kind}={self.value} (has_text={self.has_text!r})"
        return f"{self.kind}={self.value}"


@dataclass
class LocatorHealth:
    """
    Tracks which strategy resolved an element.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        used_fallback: Whether a fallback was used
        fallback_index: Position of the fallback used (if any)
        fallback_selector: The fallback selector used (if any)
    """
    element_name: str
    primary_selector: str
    used_fallback: bool = False
    fallback_index: Optional[int] = None
    fallback_selector: Optional[str] = None


class SmartLocator:
    """
    A named element with an ordered list of candidate selector strategies.

    Locator Priority Order:
        Strategies are tried left to right. In FIRST_OF mode the first
        strategy matching at least one element is returned, even when later
        strategies would match too. ANY_OF mode returns the union of every
        matching strategy.

    Usage:
        >>> search = SmartLocator(
        ...     page,
        ...     "search_input",
        ...     [SelectorStrategy.css("input[name='q']"),
        ...      SelectorStrategy.placeholder("Search")],
        ... )
        >>> locator = await search.resolve()   # None when nothing matches
        >>> locator = await search.require()   # raises ElementNotFoundError

    Resolution is never cached: the DOM changes between calls, so each call
    re-counts matches at query time.
    """

    def __init__(
        self,
        page: Page,
        element_name: str,
        strategies: Sequence[SelectorStrategy],
        mode: ResolveMode = ResolveMode.FIRST_OF,
    ):
        """
        Initialize SmartLocator.

        Args:
            page: Playwright Page object
            element_name: Logical element name used in logs and errors
            strategies: Candidate strategies in priority order
            mode: FIRST_OF (priority) or ANY_OF (union)
        """
        if not strategies:
            raise ValueError(f"No selector strategies defined for element: {element_name}")
        self.page = page
        self.name = element_name
        self.strategies = tuple(strategies)
        self.mode = mode
        self._health_records: List[LocatorHealth] = []
        self._fallback_used: Dict[str, LocatorHealth] = {}

    def __repr__(self) -> str:
        return f"SmartLocator({self.name!r}, mode={self.mode.value}, strategies={len(self.strategies)})"

    async def resolve(self) -> Optional[Locator]:
        """
        Resolve the element against the current page state.

        Returns:
            Playwright Locator for the matching strategy (or union of
            strategies), or None when no strategy matches.
        """
        if self.mode is ResolveMode.ANY_OF:
            return await self._resolve_union()

        for index, strategy in enumerate(self.strategies):
            locator = strategy.build(self.page)
            if await locator.count() > 0:
                self._record(index, strategy)
                return locator
        return None

    async def _resolve_union(self) -> Optional[Locator]:
        matched: List[Locator] = []
        for strategy in self.strategies:
            locator = strategy.build(self.page)
            if await locator.count() > 0:
                matched.append(locator)
        if not matched:
            return None
        return reduce(lambda left, right: left.or_(right), matched)

    async def require(self) -> Locator:
        """
        Resolve the element, failing when nothing matches.

        Raises:
            ElementNotFoundError: When no strategy matches
        """
        locator = await self.resolve()
        if locator is None:
            raise ElementNotFoundError(
                step=f"resolve {self.name}",
                expected=f"at least one element for '{self.name}'",
                observed="no strategy matched: " + ", ".join(self.describe_strategies()),
            )
        return locator

    def any_candidate(self) -> Locator:
        """Union of every strategy, used to wait for any candidate to appear."""
        locators = [strategy.build(self.page) for strategy in self.strategies]
        return reduce(lambda left, right: left.or_(right), locators)

    async def count(self) -> int:
        """Number of elements the element currently resolves to (0 when empty)."""
        locator = await self.resolve()
        return 0 if locator is None else await locator.count()

    async def is_visible(self) -> bool:
        """Check visibility right now, without waiting."""
        locator = await self.resolve()
        if locator is None:
            return False
        return await locator.first.is_visible()

    def describe_strategies(self) -> List[str]:
        return [strategy.describe() for strategy in self.strategies]

    def _record(self, index: int, strategy: SelectorStrategy) -> None:
        primary = self.strategies[0].describe()
        health = LocatorHealth(
            element_name=self.name,
            primary_selector=primary,
            used_fallback=index > 0,
            fallback_index=index if index > 0 else None,
            fallback_selector=strategy.describe() if index > 0 else None,
        )
        self._health_records.append(health)

        if index > 0:
            if self.name not in self._fallback_used:
                logger.warning(
                    f"⚠️ Element '{self.name}' used fallback #{index}: {strategy.describe()}"
                )
            self._fallback_used[self.name] = health
        else:
            logger.debug(f"✅ Element '{self.name}' found: {primary}")

    @property
    def fallback_used(self) -> Optional[LocatorHealth]:
        return self._fallback_used.get(self.name)

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Returns:
            Formatted health report string
        """
        return build_health_report([self])


def build_health_report(locators: Sequence[SmartLocator]) -> str:
    """
    Summarise fallback usage across several locators.

    Elements that needed a fallback are maintenance candidates: their
    primary selector no longer matches the live page.
    """
    degraded = [loc.fallback_used for loc in locators if loc.fallback_used is not None]
    if not degraded:
        return "✅ All elements used primary locators. No maintenance needed."

    report_lines = [
        "⚠️ Locator Health Report - Fallbacks Used:",
        "",
        "The following elements used fallback locators.",
        "Consider updating the primary selectors:",
        "",
    ]
    for health in degraded:
        report_lines.extend([
            f"  [{health.element_name}]",
            f"    Failed primary: {health.primary_selector}",
            f"    Used: #{health.fallback_index} -> {health.fallback_selector}",
            "",
        ])
    return "\n".join(report_lines)


__all__ = [
    "SmartLocator",
    "SelectorStrategy",
    "ResolveMode",
    "LocatorHealth",
    "ElementNotFoundError",
    "build_health_report",
]
