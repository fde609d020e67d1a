"""
================================================================================
UI Settings
================================================================================

Typed view over the `ui.*` configuration section.

Every per-step timeout is independent: a workflow that chains several waits
is bounded by the sum of its step timeouts, so a failure points at the exact
step that did not settle.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .config_loader import ConfigLoader
from .paced_input import PacingConfig


@dataclass(frozen=True)
class StepTimeouts:
    """Per-step timeouts in milliseconds."""
    consent_visible_ms: int = 10000
    consent_hidden_ms: int = 7000
    login_route_ms: int = 10000
    login_submit_ms: int = 20000
    search_url_ms: int = 15000
    suggestions_ms: int = 10000
    category_ms: int = 15000
    filter_ms: int = 15000
    location_ms: int = 15000
    sort_ms: int = 10000
    results_ms: int = 15000


@dataclass(frozen=True)
class UiSettings:
    """
    Settings for one UI test run.

    Attributes:
        base_url: Site origin, e.g. https://olx.ba
        browser: 'chromium', 'firefox' or 'webkit'
        headless: Run the browser without a window
        locale: Browser context locale
        action_timeout_ms: Default visibility timeout before an action
        network_idle_timeout_ms: Timeout for network-idle waits
        pacing: Typing delay and thinking-pause bounds
        timeouts: Per-step timeouts
        username: Login e-mail/username (None when not configured)
        password: Login password (None when not configured)
    """
    base_url: str = "https://olx.ba"
    browser: str = "chromium"
    headless: bool = True
    locale: str = "bs-BA"
    action_timeout_ms: int = 5000
    network_idle_timeout_ms: int = 15000
    pacing: PacingConfig = field(default_factory=PacingConfig)
    timeouts: StepTimeouts = field(default_factory=StepTimeouts)
    username: Optional[str] = None
    password: Optional[str] = None

    @property
    def origin(self) -> str:
        return self.base_url.rstrip("/") + "/"

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    @classmethod
    def from_config(cls, config: Optional[ConfigLoader] = None) -> "UiSettings":
        """Build settings from YAML + environment (see ConfigLoader)."""
        config = config or ConfigLoader()
        defaults = cls()
        default_pacing = PacingConfig()
        default_timeouts = StepTimeouts()

        pacing = PacingConfig(
            key_delay_min_ms=config.get("ui.pacing.key_delay_min_ms", default_pacing.key_delay_min_ms),
            key_delay_max_ms=config.get("ui.pacing.key_delay_max_ms", default_pacing.key_delay_max_ms),
            pause_min_ms=config.get("ui.pacing.pause_min_ms", default_pacing.pause_min_ms),
            pause_max_ms=config.get("ui.pacing.pause_max_ms", default_pacing.pause_max_ms),
        )
        timeouts = StepTimeouts(**{
            name: config.get(f"ui.timeouts.{name}", getattr(default_timeouts, name))
            for name in StepTimeouts.__dataclass_fields__
        })

        return cls(
            base_url=config.get("ui.base_url", defaults.base_url),
            browser=config.get("ui.browser", defaults.browser),
            headless=config.get("ui.headless", defaults.headless),
            locale=config.get("ui.locale", defaults.locale),
            action_timeout_ms=config.get("ui.action_timeout_ms", defaults.action_timeout_ms),
            network_idle_timeout_ms=config.get(
                "ui.network_idle_timeout_ms", defaults.network_idle_timeout_ms
            ),
            pacing=pacing,
            timeouts=timeouts,
            username=config.get("ui.username") or None,
            password=config.get("ui.password") or None,
        )


__all__ = [
    "StepTimeouts",
    "UiSettings",
]
