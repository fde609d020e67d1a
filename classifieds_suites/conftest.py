"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers project-wide markers, initializes logging and tags collected
tests by suite directory.

================================================================================
"""

import pytest

from classifieds_suites.ui_testing.framework.log_config import init_logger


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    init_logger()

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "functional: Functional scenario tests"
    )
    config.addinivalue_line(
        "markers", "unit: Browser-free tests of the interaction layer"
    )
    config.addinivalue_line(
        "markers", "ui: Live UI tests against the marketplace"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "search: Tests related to search and suggestions"
    )
    config.addinivalue_line(
        "markers", "filters: Tests related to filtering and sorting"
    )
    config.addinivalue_line(
        "markers", "auth: Tests related to authentication"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-tag tests by the directory they live in."""
    for item in items:
        parts = item.path.parts
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
        elif "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Classifieds Marketplace UI Automation",
        "=" * 60,
        "",
    ]
