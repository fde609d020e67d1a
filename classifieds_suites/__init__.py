"""
Classifieds marketplace test suites.

`ui_testing` holds the Playwright framework, the page objects and the live
scenarios; `unit` tests the framework against an in-memory page.
"""
