from __future__ import annotations

import functools
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple, Type, TypeVar, ParamSpec

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    NoSuchElementException,
    NoSuchFrameException,
    NoSuchWindowException,
    StaleElementReferenceException,
)

from recplay.selectors.errors import NotFoundError, TransientQueryError, WaitTimeoutError
from recplay.utils.logger import get_logger

P = ParamSpec("P")
T = TypeVar("T")

# "Target not in the expected state yet": swallowed by poll() and retried.
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (
    TransientQueryError,
    NotFoundError,
    NoSuchElementException,
    StaleElementReferenceException,
    ElementClickInterceptedException,
    ElementNotInteractableException,
    NoSuchFrameException,
    NoSuchWindowException,
)


# ---------------- Monotonic time helpers ----------------

def now_ms() -> int:
    """Monotonic time in milliseconds."""
    return time.monotonic_ns() // 1_000_000


def sleep_ms(ms: int) -> None:
    if ms <= 0:
        return
    time.sleep(ms / 1000.0)


@dataclass
class Stopwatch:
    """Simple stopwatch usable as a context manager."""
    start_ms: Optional[int] = None

    def start(self) -> "Stopwatch":
        self.start_ms = now_ms()
        return self

    def elapsed_ms(self) -> int:
        if self.start_ms is None:
            return 0
        return max(0, now_ms() - self.start_ms)

    def __enter__(self) -> "Stopwatch":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


# ---------------- Condition poller ----------------

class WaitOutcome(str, Enum):
    SATISFIED = "satisfied"
    TIMED_OUT = "timed_out"
    # timed out while the predicate kept raising a transient error
    ERRED = "erred"


@dataclass
class WaitResult:
    outcome: WaitOutcome
    value: Any = None
    attempts: int = 0
    elapsed: float = 0.0
    last_error: Optional[BaseException] = None  # set for ERRED

    @property
    def satisfied(self) -> bool:
        return self.outcome == WaitOutcome.SATISFIED

    @property
    def timed_out(self) -> bool:
        """True for both TIMED_OUT and ERRED."""
        return self.outcome in (WaitOutcome.TIMED_OUT, WaitOutcome.ERRED)

    def __bool__(self) -> bool:
        return self.satisfied


def poll(
    predicate: Callable[[], Any],
    timeout: float,
    interval: float = 0.5,
    *,
    ignored: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    description: Optional[str] = None,
) -> WaitResult:
    """
    Evaluate `predicate()` until it returns a truthy value or `timeout`
    seconds have elapsed.

    Exceptions listed in `ignored` count as "not satisfied yet". Anything
    else propagates from the call that raised it. The predicate is always
    evaluated at least once, and a timeout (TIMED_OUT, or ERRED when the last
    evaluation raised a transient error) is only reported once the whole
    timeout has passed.

    The result is polarity neutral: callers that wait for something to go
    away decide themselves what a timeout means.
    """
    log = get_logger(__name__)
    timeout = max(0.0, float(timeout))
    interval = max(0.001, float(interval))
    started = time.monotonic()
    deadline = started + timeout
    attempts = 0
    last_error: Optional[BaseException] = None

    while True:
        attempts += 1
        try:
            value = predicate()
        except ignored as exc:  # type: ignore[misc]
            last_error = exc
            value = None
        else:
            last_error = None
            if value:
                return WaitResult(
                    outcome=WaitOutcome.SATISFIED,
                    value=value,
                    attempts=attempts,
                    elapsed=time.monotonic() - started,
                )

        now = time.monotonic()
        if now >= deadline:
            desc = f" ({description})" if description else ""
            log.debug(f"poll timed out after {timeout:g}s and {attempts} attempt(s){desc}")
            return WaitResult(
                outcome=WaitOutcome.TIMED_OUT if last_error is None else WaitOutcome.ERRED,
                attempts=attempts,
                elapsed=now - started,
                last_error=last_error,
            )
        time.sleep(min(interval, deadline - now))


def wait_until(
    predicate: Callable[[], T],
    timeout: float,
    interval: float = 0.5,
    *,
    ignored: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    description: Optional[str] = None,
) -> T:
    """
    Raising companion of poll(): return the predicate's truthy value, or
    raise WaitTimeoutError when the deadline passes.
    """
    result = poll(predicate, timeout, interval, ignored=ignored, description=description)
    if result.satisfied:
        return result.value
    desc = f" ({description})" if description else ""
    raise WaitTimeoutError(f"timed out after {timeout:g}s{desc}", last_error=result.last_error)


# ---------------- measure decorator ----------------

def measure(label: str = "", level: str = "DEBUG") -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Log the execution time of a function:

        @measure("open page")
        def open_page(...): ...
    """
    log = get_logger(__name__)
    log_fn = getattr(log, level.lower(), log.debug)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            with Stopwatch() as sw:
                try:
                    return func(*args, **kwargs)
                finally:
                    ms = sw.elapsed_ms()
                    human = f"{ms} ms" if ms < 1000 else f"{ms/1000:.3f} s"
                    log_fn(f"{label or func.__name__} took {human}")
        return wrapper
    return decorator
