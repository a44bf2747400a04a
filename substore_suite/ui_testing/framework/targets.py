"""
Element targets.

Every CommonEvents operation accepts either a selector or a live element
handle. The two cases are modelled as a small tagged variant and resolved
once, at the call boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from playwright.async_api import ElementHandle


@dataclass(frozen=True)
class ByLocator:
    """Element addressed by selector (CSS, ``xpath=...``, ``#id``)."""

    selector: str

    def describe(self) -> str:
        return self.selector


@dataclass(frozen=True)
class ByHandle:
    """Element addressed by a resolved handle; may go stale after navigation."""

    element: ElementHandle
    description: str = "element handle"

    def describe(self) -> str:
        return self.description


Target = Union[ByLocator, ByHandle]


def as_target(value: Any) -> Target:
    """
    Promote a plain value to a Target.

    Strings become ``ByLocator``; anything else is treated as an element handle.
    """
    if isinstance(value, (ByLocator, ByHandle)):
        return value
    if isinstance(value, str):
        return ByLocator(value)
    if value is None:
        raise ValueError("Element target must not be None")
    return ByHandle(value)


__all__ = [
    "ByLocator",
    "ByHandle",
    "Target",
    "as_target",
]
