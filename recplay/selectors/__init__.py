"""
Selectors package
-----------------
Locator strings ("id=login", ".btn", "//a", "css=li:eq(2)") and the element
queries that resolve them against a WebDriver.
"""

from .errors import (
    InvalidLocatorError,
    NotFoundError,
    NthMatchOutOfRange,
    RecplayError,
    TransientQueryError,
    WaitTimeoutError,
)
from .locator import Locator, Strategy, parse_locator, split_nth
from .strategy import locate, locate_all, query_all

__all__ = [
    "Locator",
    "Strategy",
    "parse_locator",
    "split_nth",
    "locate",
    "locate_all",
    "query_all",
    "RecplayError",
    "InvalidLocatorError",
    "NotFoundError",
    "NthMatchOutOfRange",
    "TransientQueryError",
    "WaitTimeoutError",
]
