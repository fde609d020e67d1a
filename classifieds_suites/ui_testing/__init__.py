"""UI automation for the classifieds marketplace: framework, page objects and scenarios."""
