"""Stall retry decorator for async HTTP operations.

A slow Edge management node sometimes accepts a connection and then takes
longer than the read timeout to send response headers. Those stalls are
transient, so reads are retried with a fixed pause until a wall-clock
ceiling is reached. Every other failure is raised immediately.
"""

import asyncio
import logging
import time
from functools import wraps
from typing import Callable, Optional, Tuple, Type, TypeVar

import httpx

from ...exceptions import RequestTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

STALL_CEILING_SECONDS = 300.0
STALL_PAUSE_SECONDS = 5.0


def retry_on_stall(
    ceiling: float = STALL_CEILING_SECONDS,
    pause: float = STALL_PAUSE_SECONDS,
    exceptions: Tuple[Type[Exception], ...] = (httpx.ReadTimeout,),
    clock: Optional[Callable[[], float]] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Create a decorator that retries an async call while it stalls.

    :param ceiling: Wall-clock seconds after which the stall is reported
    :type ceiling: float
    :param pause: Seconds to wait before the next attempt
    :type pause: float
    :param exceptions: Exception types that count as a stall
    :type exceptions: Tuple[Type[Exception], ...]
    :param clock: Monotonic clock, injectable for tests
    :type clock: Optional[Callable[[], float]]
    :return: Decorator function that can be applied to async functions
    :rtype: Callable[[Callable[..., T]], Callable[..., T]]
    :raises RequestTimeoutError: When the call is still stalling at the ceiling
    """
    now = clock or time.monotonic

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            started = now()
            attempt = 0
            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    elapsed = now() - started
                    if elapsed + pause >= ceiling:
                        raise RequestTimeoutError(
                            f"still awaiting response headers after {attempt} "
                            f"attempt(s) and {elapsed:.0f}s: {e}",
                            details={"attempts": attempt, "elapsed": elapsed},
                            cause=e,
                        ) from e
                    logger.debug(
                        f"Response headers not received (attempt {attempt}), "
                        f"retrying in {pause}s: {e}"
                    )
                    await asyncio.sleep(pause)

        return wrapper

    return decorator
