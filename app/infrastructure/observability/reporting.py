"""
Timing/outcome reporting for service entry points.

Wraps an async callable so every invocation is logged with its duration.
Failures are logged and re-raised unchanged; callers see the original
exception.
"""

import functools
import time
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def with_reporting(
    func: Callable[P, Awaitable[R]], name: str
) -> Callable[P, Awaitable[R]]:
    """
    Wrap an async function with duration and failure reporting.

    Args:
        func: Coroutine function to wrap
        name: Span name used in the log entries

    Returns:
        Coroutine function with the same signature
    """

    @functools.wraps(func)
    async def _wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start_time = time.perf_counter()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            logger.error(
                "Reported operation failed",
                operation=name,
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        logger.debug(
            "Reported operation completed",
            operation=name,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return result

    return _wrapper
