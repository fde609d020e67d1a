"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based interaction & synchronization layer.

Components:
    - smart_locator: Prioritised / union selector resolution
    - wait_helpers: Bounded waits (visible, hidden, URL, network idle)
    - paced_input: Human-paced typing and clicking
    - action_coordinator: Race-free action + expectation pairing
    - page_base: Base page object
    - browser_manager: Browser lifecycle management

Author: Automation Team
License: MIT
================================================================================
"""

from .action_coordinator import ActionCoordinator
from .browser_manager import BrowserManager
from .exceptions import (
    AuthFailedError,
    ElementNotFoundError,
    FilterNotAppliedError,
    NoResultsError,
    WaitTimeoutError,
    WorkflowError,
)
from .paced_input import PacedInputDriver, PacingConfig
from .page_base import BasePage
from .settings import StepTimeouts, UiSettings
from .smart_locator import ResolveMode, SelectorStrategy, SmartLocator

__all__ = [
    "ActionCoordinator",
    "BrowserManager",
    "BasePage",
    "PacedInputDriver",
    "PacingConfig",
    "SmartLocator",
    "SelectorStrategy",
    "ResolveMode",
    "StepTimeouts",
    "UiSettings",
    "WorkflowError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "AuthFailedError",
    "FilterNotAppliedError",
    "NoResultsError",
]
