from __future__ import annotations

from typing import Optional


class RecplayError(RuntimeError):
    pass


class InvalidLocatorError(RecplayError, ValueError):
    """The locator string does not resolve to a known strategy."""

    def __init__(self, locator: str, reason: str = "") -> None:
        self.locator = locator
        self.reason = reason
        msg = f"Cannot parse locator: {locator!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg)


class NotFoundError(RecplayError, LookupError):
    """A query matched nothing."""

    def __init__(self, locator: str, message: Optional[str] = None) -> None:
        self.locator = locator
        super().__init__(message or f"Failed to find element: {locator}")


class NthMatchOutOfRange(NotFoundError, IndexError):
    def __init__(self, locator: str, index: int, count: int) -> None:
        self.index = index
        self.count = count
        super().__init__(
            locator,
            f"Failed to find element: {locator} (index {index} out of range, {count} match(es))",
        )


class TransientQueryError(RecplayError):
    """The target is not in a queryable state yet (detached, re-rendering, ...)."""


class WaitTimeoutError(RecplayError, TimeoutError):
    def __init__(self, message: str, last_error: Optional[BaseException] = None) -> None:
        self.last_error = last_error
        if last_error is not None:
            message = f"{message}; last error: {last_error!r}"
        super().__init__(message)
