"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the marketplace pages.

Each page class encapsulates:
    - Element locators (declared once per page instance)
    - Page-specific workflows
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .home_page import ConsentOutcome, HomePage
from .search_page import Condition, SearchPage, SortOption

__all__ = [
    "HomePage",
    "ConsentOutcome",
    "SearchPage",
    "Condition",
    "SortOption",
]
