"""
Top-level package for the CAN frame browser.

This package exposes the core architecture (catalog model, indexer, query
engines, selection state) and a Dash UI adapter.
Most code should import from submodules such as:
    can_browser.core
    can_browser.services
    can_browser.ui
"""

__all__: list[str] = []
