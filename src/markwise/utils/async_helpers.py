"""
Async Utility Functions

Retry and cancellation helpers for the asynchronous calls made
against the remote semantic scorer.
"""

import asyncio
import random
from typing import Awaitable, Callable, Any, Optional, TypeVar
from functools import wraps

from markwise.core.exceptions import ScoringServiceError, InvalidScoringResponseError
from .logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def retry_async(func: Callable[[], Awaitable[T]],
                      max_retries: int = 0,
                      base_delay: float = 1.0,
                      max_delay: float = 30.0,
                      backoff_factor: float = 2.0,
                      jitter: bool = True,
                      description: Optional[str] = None) -> T:
    """
    Await ``func()`` with exponential backoff on transient scorer failures.

    InvalidScoringResponseError is raised immediately and never retried.

    Args:
        func: Zero-argument coroutine factory
        max_retries: Extra attempts after the first one (0 means single attempt)
        base_delay: Base delay in seconds
        max_delay: Maximum delay in seconds
        backoff_factor: Multiplier for exponential backoff
        jitter: Add random jitter to prevent thundering herd
        description: Name used in log messages
    """
    name = description or getattr(func, "__name__", "call")

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except InvalidScoringResponseError:
            raise
        except (ScoringServiceError, asyncio.TimeoutError) as e:
            if attempt == max_retries:
                if max_retries:
                    logger.error(f"{name} failed after {max_retries} retries: {str(e)}")
                raise

            delay = min(base_delay * (backoff_factor ** attempt), max_delay)
            if jitter:
                delay = delay * (0.5 + random.random() * 0.5)

            logger.warning(
                f"{name} failed (attempt {attempt + 1}/{max_retries + 1}), "
                f"retrying in {delay:.2f}s: {str(e)}"
            )
            await asyncio.sleep(delay)

    # range() always runs at least once; loop exits via return or raise
    raise RuntimeError("unreachable")


def retry_with_backoff(max_retries: int = 3, base_delay: float = 1.0,
                       max_delay: float = 30.0, backoff_factor: float = 2.0,
                       jitter: bool = True):
    """
    Decorator form of :func:`retry_async`.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Base delay in seconds
        max_delay: Maximum delay in seconds
        backoff_factor: Multiplier for exponential backoff
        jitter: Add random jitter to prevent thundering herd
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            return await retry_async(
                lambda: func(*args, **kwargs),
                max_retries=max_retries,
                base_delay=base_delay,
                max_delay=max_delay,
                backoff_factor=backoff_factor,
                jitter=jitter,
                description=func.__name__,
            )
        return wrapper
    return decorator


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a running batch."""

    def __init__(self):
        self._event = asyncio.Event()
        self.reason: Optional[str] = None

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation; running evaluations stop at the next checkpoint."""
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self) -> None:
        """Block until cancellation is requested."""
        await self._event.wait()
