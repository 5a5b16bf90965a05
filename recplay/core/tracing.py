from __future__ import annotations

"""Call tracing
---------------
`traced` marks a public Session operation. When the session is verbose, the
outermost traced call is echoed as "<prefix>name(args)"; traced calls made
from inside another traced call are not. Nesting depth travels through the
call chain in a ContextVar.
"""

import functools
from contextvars import ContextVar
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_call_depth: ContextVar[int] = ContextVar("recplay_call_depth", default=0)


def is_top_level() -> bool:
    """True when no traced operation is currently running in this context."""
    return _call_depth.get() == 0


def format_call(name: str, args: tuple, kwargs: dict) -> str:
    parts = [str(a) for a in args]
    parts += [f"{k}={v}" for k, v in kwargs.items()]
    return f"{name}({', '.join(parts)})" if parts else name


def traced(func: F) -> F:
    name = func.__name__

    @functools.wraps(func)
    def wrapper(self, *args: Any, **kwargs: Any) -> Any:
        if is_top_level():
            self._trace_call(name, args, kwargs)
        token = _call_depth.set(_call_depth.get() + 1)
        try:
            return func(self, *args, **kwargs)
        finally:
            _call_depth.reset(token)

    return wrapper  # type: ignore[return-value]
