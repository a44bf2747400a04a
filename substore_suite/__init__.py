"""
Substore UI automation suite.

Page objects, Playwright helpers and pytest suites for the WardSupply
(Substore) module of the hospital web application.

Keeping `substore_suite` importable supports:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - CI/CD module imports
"""

__version__ = "1.0.0"
