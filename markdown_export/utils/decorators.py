"""
Utility layer - decorators
Logging as a cross-cutting concern
"""

import inspect
import functools
import time
from typing import Callable, TypeVar

from ..log import logger

T = TypeVar("T")


def log_execution(func: Callable[..., T]) -> Callable[..., T]:
    """Log start, duration and failure of a call"""

    @functools.wraps(func)
    async def async_wrapper(*args, **kwargs) -> T:
        func_name = func.__qualname__
        logger.debug(f"[MarkdownExport] {func_name} started")
        start_time = time.monotonic()
        try:
            result = await func(*args, **kwargs)
            elapsed = time.monotonic() - start_time
            logger.debug(f"[MarkdownExport] {func_name} finished in {elapsed:.2f}s")
            return result
        except Exception as e:
            elapsed = time.monotonic() - start_time
            logger.error(
                f"[MarkdownExport] {func_name} failed after {elapsed:.2f}s: {e}"
            )
            raise

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs) -> T:
        func_name = func.__qualname__
        logger.debug(f"[MarkdownExport] {func_name} started")
        start_time = time.monotonic()
        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start_time
            logger.debug(f"[MarkdownExport] {func_name} finished in {elapsed:.2f}s")
            return result
        except Exception as e:
            elapsed = time.monotonic() - start_time
            logger.error(
                f"[MarkdownExport] {func_name} failed after {elapsed:.2f}s: {e}"
            )
            raise

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
