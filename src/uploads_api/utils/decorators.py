"""Decorator utilities for cross-cutting concerns."""
import time
import logging
import functools
from typing import Any, Callable, TypeVar, cast

from uploads_api.errors import UploadsApiError

# Setup logging
logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def log_execution_time(func: F) -> F:
    """Decorator to log function execution time.

    Request-level errors (bad input, missing data) are logged at info level,
    anything else at error level. The exception is always re-raised.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that logs execution time
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        try:
            result = func(*args, **kwargs)
            duration = time.perf_counter() - start_time
            logger.info(f"{func.__qualname__} completed in {duration:.3f}s")
            return result
        except UploadsApiError as e:
            duration = time.perf_counter() - start_time
            log = logger.error if e.status_code >= 500 else logger.info
            log(f"{func.__qualname__} ended after {duration:.3f}s: {e.message}")
            raise
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(f"{func.__qualname__} failed after {duration:.3f}s: {str(e)}")
            raise
    return cast(F, wrapper)
