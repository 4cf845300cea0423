"""Pytest configuration and shared fixtures for vw tests."""

# Import all fixtures from fixtures module to make them available globally
from tests.fixtures import (
    VhdlFactory,
    make_sources,
    tmp_workspace,
    widget_sources,
)

__all__ = [
    "VhdlFactory",
    "make_sources",
    "tmp_workspace",
    "widget_sources",
]
