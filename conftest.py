"""
Repository-level pytest configuration.

Provides the project root and safe environment defaults. No credentials are
set here: UI_USERNAME / UI_PASSWORD must come from the shell or CI secrets.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session", autouse=True)
def _environment_defaults() -> Generator[None, None, None]:
    """Default the target site unless the user/CI already chose one."""
    os.environ.setdefault("UI_BASE_URL", "https://olx.ba")
    yield
