"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers the suite's markers and tags collected tests by the directory they
live in, so `-m unit` or `-m e2e` works without decorating every module.

================================================================================
"""

import pytest


MARKERS = {
    # Priority
    "P0": "Critical priority - must pass before a release",
    "P1": "High priority - core Substore flows",
    "P2": "Medium priority - secondary checks",
    "P3": "Low priority - exhaustive validation",
    # Test type
    "smoke": "Quick verification tests",
    "regression": "Full regression run",
    "unit": "Browser-free tests against the in-memory page",
    "e2e": "End-to-end tests against a live application",
    "ui": "Tests that live under ui_testing",
    # Feature
    "auth": "Login and logout",
    "substore": "Substore (WardSupply) module",
}


def pytest_configure(config):
    for name, description in MARKERS.items():
        config.addinivalue_line("markers", f"{name}: {description}")


def pytest_collection_modifyitems(config, items):
    """Auto-add markers based on where a test lives."""
    for item in items:
        parts = item.path.parts
        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)
            item.add_marker(pytest.mark.e2e)
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    return ["Substore UI Automation Suite"]
