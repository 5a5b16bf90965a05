from __future__ import annotations

"""Logging
----------
Everything logs under the "recplay" logger: a Rich console handler on stderr,
an optional rotating JSON file (LOG_TO_FILE) and per-run JSON files attached
by the player. Context bound with `bind`/`bound` lands in every JSON record.
"""

import json
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Iterator, Optional

from rich.console import Console
from rich.logging import RichHandler

from recplay.utils.config import LogLevel, get_settings

ROOT = "recplay"

_config_lock = threading.Lock()
_configured = False
_context: Dict[str, Any] = {}


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    default_time_format = "%Y-%m-%dT%H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(self.default_time_format),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update(context)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _py_level(level: LogLevel | str | int) -> int:
    if isinstance(level, int):
        return level
    name = level.value if isinstance(level, LogLevel) else str(level)
    resolved = logging.getLevelName(name.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _json_file_handler(path: os.PathLike | str, level: int, backups: int) -> logging.Handler:
    p = os.fspath(path)
    os.makedirs(os.path.dirname(p) or ".", exist_ok=True)
    handler = RotatingFileHandler(p, maxBytes=5 * 1024 * 1024, backupCount=backups, encoding="utf-8", delay=True)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter())
    return handler


def _ensure_configured() -> None:
    global _configured
    if _configured:
        return

    with _config_lock:
        if _configured:
            return

        settings = get_settings()
        level = _py_level(settings.LOG_LEVEL)

        logger = logging.getLogger(ROOT)
        logger.setLevel(level)
        for h in list(logger.handlers):
            logger.removeHandler(h)

        console = RichHandler(
            console=Console(stderr=True, no_color=not settings.COLORIZED_OUTPUT),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            omit_repeated_times=False,
        )
        console.setFormatter(logging.Formatter("%(message)s"))
        console.setLevel(level)
        logger.addHandler(console)

        if settings.LOG_TO_FILE:
            logger.addHandler(_json_file_handler(settings.LOG_FILE, level, backups=5))

        # selenium logs every wire command at DEBUG
        for noisy in ("selenium", "urllib3"):
            logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

        _configured = True


def get_logger(name: Optional[str] = None) -> logging.LoggerAdapter:
    """Logger under the "recplay" hierarchy carrying the bound context."""
    _ensure_configured()
    if not name:
        name = ROOT
    elif not name.startswith(ROOT):
        name = f"{ROOT}.{name}"
    return logging.LoggerAdapter(logging.getLogger(name), extra={"context": _context})


def set_log_level(level: LogLevel | str) -> None:
    _ensure_configured()
    py_level = _py_level(level)
    logger = logging.getLogger(ROOT)
    logger.setLevel(py_level)
    for h in logger.handlers:
        h.setLevel(py_level)


def bind(**kwargs: Any) -> None:
    """Attach context (e.g. run_id) to every subsequent record."""
    _context.update(kwargs)


def unbind(*keys: str) -> None:
    for k in keys:
        _context.pop(k, None)


@contextmanager
def bound(**kwargs: Any) -> Iterator[None]:
    """`bind` for the duration of a with-block."""
    bind(**kwargs)
    try:
        yield
    finally:
        unbind(*kwargs)


def log_with_context(logger: logging.LoggerAdapter, **kwargs: Any) -> logging.LoggerAdapter:
    """
    Adapter with extra context layered on `logger`'s:

        step_log = log_with_context(log, step_index=3, command="click")
        step_log.info("clicking")
    """
    merged = dict(_context)
    if isinstance(logger.extra, dict) and isinstance(logger.extra.get("context"), dict):
        merged.update(logger.extra["context"])
    merged.update(kwargs)
    return logging.LoggerAdapter(logger.logger, extra={"context": merged})


def attach_file_logger(path: os.PathLike | str, level: Optional[int] = None) -> logging.Handler:
    """Add a JSON file handler; pass the result to detach_file_logger when done."""
    _ensure_configured()
    logger = logging.getLogger(ROOT)
    handler = _json_file_handler(path, level if level is not None else logger.level, backups=3)
    logger.addHandler(handler)
    return handler


def detach_file_logger(handler: logging.Handler) -> None:
    logging.getLogger(ROOT).removeHandler(handler)
    handler.close()


@contextmanager
def file_logging(path: os.PathLike | str) -> Iterator[logging.Handler]:
    handler = attach_file_logger(path)
    try:
        yield handler
    finally:
        detach_file_logger(handler)


__all__ = [
    "JsonFormatter",
    "get_logger",
    "set_log_level",
    "bind",
    "unbind",
    "bound",
    "log_with_context",
    "attach_file_logger",
    "detach_file_logger",
    "file_logging",
]
