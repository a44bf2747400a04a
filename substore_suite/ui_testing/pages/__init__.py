"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for application pages.

Each page class encapsulates:
    - Element locators (frozen dataclass per page)
    - Page-specific workflows
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .login_page import LoginLocators, LoginPage
from .substore_page import SubstoreLocators, SubstorePage

__all__ = [
    "LoginLocators",
    "LoginPage",
    "SubstoreLocators",
    "SubstorePage",
]
