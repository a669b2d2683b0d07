"""
Logging for pycurves.

This module provides:
- Configurable log levels via environment variables
- JSON formatting option
- Profiling helpers for construction-time work (boundary-fit solves)

Curve evaluation itself never logs; only construction, differentiation into
new curves, materialization and configuration loading emit DEBUG records.
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

F = TypeVar("F", bound=Callable[..., Any])


# =============================================================================
# Log Level Configuration
# =============================================================================

LOG_LEVEL_ENV = "PYCURVES_LOG_LEVEL"
LOG_FORMAT_ENV = "PYCURVES_LOG_FORMAT"
LOG_FILE_ENV = "PYCURVES_LOG_FILE"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}'


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    return getattr(logging, level_name, logging.WARNING)


def get_log_format() -> str:
    """Get log format from environment variable."""
    format_type = os.environ.get(LOG_FORMAT_ENV, "default").lower()
    if format_type == "json":
        return JSON_FORMAT
    return DEFAULT_FORMAT


def get_log_file() -> Optional[str]:
    return os.environ.get(LOG_FILE_ENV)


# =============================================================================
# Logger Setup
# =============================================================================

_root_logger: Optional[logging.Logger] = None
_handlers: list = []


def setup_logging(
    level: Optional[int] = None,
    format_str: Optional[str] = None,
    log_file: Optional[str] = None,
    force: bool = False,
) -> logging.Logger:
    """Setup the pycurves logging system.

    Args:
        level: Log level (default: from env or WARNING).
        format_str: Log format string (default: from env or DEFAULT_FORMAT).
        log_file: Optional file to write logs to.
        force: Force reconfiguration even if already setup.

    Returns:
        Configured package logger.
    """
    global _root_logger, _handlers

    if _root_logger is not None and not force:
        return _root_logger

    if _root_logger is not None:
        for handler in _handlers:
            _root_logger.removeHandler(handler)
            handler.close()
    _handlers = []

    _root_logger = logging.getLogger("pycurves")
    _root_logger.setLevel(level or get_log_level())
    _root_logger.propagate = False

    formatter = logging.Formatter(format_str or get_log_format())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    _root_logger.addHandler(console_handler)
    _handlers.append(console_handler)

    file_path = log_file or get_log_file()
    if file_path:
        file_handler = logging.FileHandler(file_path)
        file_handler.setFormatter(formatter)
        _root_logger.addHandler(file_handler)
        _handlers.append(file_handler)

    return _root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'pycurves.').
              If None, returns the package logger.

    Returns:
        Logger instance.
    """
    if _root_logger is None:
        setup_logging()

    if name:
        return logging.getLogger(f"pycurves.{name}")
    return _root_logger


# =============================================================================
# Convenience Functions
# =============================================================================


def LOG_DEBUG(msg: str, *args: Any, **kwargs: Any) -> None:
    get_logger().debug(msg, *args, **kwargs)


# =============================================================================
# Performance Profiling
# =============================================================================


@contextmanager
def profile_scope(name: str, log_level: int = logging.DEBUG, logger: Optional[logging.Logger] = None):
    """Context manager for profiling code execution time.

    Args:
        name: Name of the profiled scope.
        log_level: Log level for the timing message.
        logger: Logger to report to (default: package logger).

    Example:
        with profile_scope("c2 boundary fit"):
            coefficients = solve(...)
    """
    start_time = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start_time
        (logger or get_logger()).log(log_level, "%s took %.6fs", name, elapsed)


def timed(func: F) -> F:
    """Decorator logging the execution time of ``func`` at DEBUG."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start_time = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start_time
            get_logger().debug("%s took %.6fs", func.__qualname__, elapsed)

    return wrapper  # type: ignore


setup_logging()
