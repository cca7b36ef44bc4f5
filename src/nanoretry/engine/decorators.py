"""
Retry decorators.
"""

import functools
from typing import Awaitable, Callable, ParamSpec, TypeVar

from .aio import AsyncRetryEngine
from .policy import RetryPolicy
from .sync import RetryEngine

P = ParamSpec("P")
T = TypeVar("T")


def with_retry(
    policy: RetryPolicy | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for synchronous functions with retry logic.

    Args:
        policy: Retry policy (default: RetryPolicy())

    Returns:
        Decorated function with retry behavior
    """
    engine = RetryEngine(policy)

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return engine.execute(functools.partial(func, *args, **kwargs))

        return wrapper

    return decorator


def async_with_retry(
    policy: RetryPolicy | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Decorator for async functions with retry logic.

    Args:
        policy: Retry policy (default: RetryPolicy())

    Returns:
        Decorated async function with retry behavior
    """
    engine = AsyncRetryEngine(policy)

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return await engine.execute(functools.partial(func, *args, **kwargs))

        return wrapper

    return decorator
