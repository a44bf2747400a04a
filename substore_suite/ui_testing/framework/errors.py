"""
================================================================================
UI Action Errors
================================================================================

Error taxonomy for page interactions.

Every timing-dependent failure is classified so a test report can tell
apart a locator that never matched, a condition that never became true and
an element handle that went stale, without re-running the test.

    UIActionError
     ├── ElementNotFoundError   locator matched nothing within the bound
     ├── WaitTimeoutError       condition never became true
     ├── StaleElementError      handle detached from the DOM
     ├── VerificationError      actual value did not match expected
     ├── ScreenshotError        screenshot could not be persisted
     ├── WorkflowError          business step failed (wraps the above)
     └── TestDataError          fixture or expectation data missing

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional


class UIActionError(Exception):
    """Base class for all page interaction failures."""

    def __init__(
        self,
        message: str,
        target: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Args:
            message: Human-readable description of the failure
            target: Locator or element description the action was aimed at
            timeout: Wait bound in milliseconds, when one applied
        """
        super().__init__(message)
        self.message = message
        self.target = target
        self.timeout = timeout

    def __str__(self) -> str:
        return self.message


class ElementNotFoundError(UIActionError):
    """Raised when a locator matches nothing within the wait bound."""
    pass


class WaitTimeoutError(UIActionError):
    """Raised when a wait condition never becomes true."""
    pass


class StaleElementError(UIActionError):
    """Raised when an element handle is no longer attached to the DOM."""
    pass


class VerificationError(UIActionError):
    """Raised when an observed value does not match the expected one."""

    def __init__(
        self,
        message: str,
        expected: Any = None,
        actual: Any = None,
        target: Optional[str] = None,
    ):
        super().__init__(message, target=target)
        self.expected = expected
        self.actual = actual


class ScreenshotError(UIActionError):
    """Raised when a screenshot cannot be written to disk."""
    pass


class TestDataError(UIActionError, KeyError):
    """Raised when fixture or expectation data lacks a required key."""

    # Not a test class, despite the name
    __test__ = False

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class WorkflowError(UIActionError):
    """
    Raised by page-object workflows.

    Carries the business step that failed; the low-level error is chained
    as ``__cause__`` so the report shows the full path from step to locator.
    """

    def __init__(self, step: str, message: str):
        super().__init__(f"{step}: {message}")
        self.step = step

    @property
    def root_cause(self) -> BaseException:
        """Innermost exception of the cause chain."""
        error: BaseException = self
        while error.__cause__ is not None:
            error = error.__cause__
        return error

    @property
    def ui_cause(self) -> Optional[UIActionError]:
        """Innermost UIActionError of the cause chain, if any."""
        found: Optional[UIActionError] = None
        error: Optional[BaseException] = self.__cause__
        while error is not None:
            if isinstance(error, UIActionError):
                found = error
            error = error.__cause__
        return found


__all__ = [
    "UIActionError",
    "ElementNotFoundError",
    "WaitTimeoutError",
    "StaleElementError",
    "VerificationError",
    "ScreenshotError",
    "TestDataError",
    "WorkflowError",
]
