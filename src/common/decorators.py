"""
Decorators for per-bundle catalog work.

Failures and timings are logged on the decorated function's own module
logger, so they appear next to that module's other messages and carry
structured fields for JSON logs.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Optional, Type

# Extraction slower than this is reported at WARNING
SLOW_CALL_SECONDS = 2.0


def handle_errors(
    *exception_types: Type[Exception],
    default: Any = None,
    log_level: int = logging.WARNING,
    message: Optional[str] = None,
):
    """
    Return ``default`` when the wrapped call raises one of ``exception_types``.

    Only the listed types are absorbed; anything else propagates.

    Example:
        @handle_errors(OSError, default=False, message="Skipping entry")
        def is_candidate(self, path):
            ...
    """
    if not exception_types:
        raise TypeError("handle_errors needs at least one exception type")

    def decorator(func: Callable) -> Callable:
        func_logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except exception_types as e:
                func_logger.log(
                    log_level,
                    f"{message or func.__qualname__ + ' failed'}: {e}",
                    exc_info=log_level >= logging.ERROR,
                    extra={"extra_data": {
                        "operation": func.__qualname__,
                        "error": type(e).__name__,
                    }},
                )
                return default
        return wrapper
    return decorator


def timed(func: Optional[Callable] = None, *, slow_after: float = SLOW_CALL_SECONDS):
    """
    Log how long the wrapped call took.

    Usable bare (``@timed``) or with a threshold (``@timed(slow_after=5)``).
    Calls at or above the threshold are logged at WARNING, others at DEBUG.
    """
    def decorator(func: Callable) -> Callable:
        func_logger = logging.getLogger(func.__module__)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            outcome = "failed"
            try:
                result = func(*args, **kwargs)
                outcome = "completed"
                return result
            finally:
                elapsed = time.perf_counter() - start
                level = logging.WARNING if elapsed >= slow_after else logging.DEBUG
                func_logger.log(
                    level,
                    f"{func.__qualname__} {outcome} in {elapsed:.3f}s",
                    extra={"extra_data": {
                        "operation": func.__qualname__,
                        "outcome": outcome,
                        "elapsed": round(elapsed, 3),
                    }},
                )
        return wrapper

    if func is not None:
        return decorator(func)
    return decorator
