"""
nanoretry - Retry Engine.

Attempt loop with per-attempt timeouts, a global deadline, exception-type
filtering and pluggable backoff.
"""

from .policy import RetryPolicy
from .attempt import (
    Attempt,
    AttemptOutcome,
    CancellationToken,
    ExecutionPhase,
    ExecutionState,
    current_attempt,
)
from .base import BaseRetryEngine
from .sync import RetryEngine
from .aio import AsyncRetryEngine
from .builder import Retrier
from .decorators import with_retry, async_with_retry

__all__ = [
    "RetryPolicy",
    "Attempt",
    "AttemptOutcome",
    "CancellationToken",
    "ExecutionPhase",
    "ExecutionState",
    "current_attempt",
    "BaseRetryEngine",
    "RetryEngine",
    "AsyncRetryEngine",
    "Retrier",
    "with_retry",
    "async_with_retry",
]
