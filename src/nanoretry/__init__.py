"""
nanoretry - Lightweight retry execution engine.

Run a fallible operation under a retry policy: bounded attempts, per-attempt
timeouts, a global deadline and configurable backoff.
"""

from .backoff import (
    Backoff,
    FixedBackoff,
    LinearBackoff,
    ExponentialBackoff,
    RandomBackoff,
    ExponentialJitterBackoff,
)
from .engine import (
    RetryPolicy,
    Attempt,
    AttemptOutcome,
    CancellationToken,
    current_attempt,
    RetryEngine,
    AsyncRetryEngine,
    Retrier,
    with_retry,
    async_with_retry,
)
from .exceptions import (
    RetryError,
    InvalidPolicyError,
    AttemptTimeoutError,
    DeadlineExceededError,
    RetryInterruptedError,
    UnexpectedFailureError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Backoff
    "Backoff",
    "FixedBackoff",
    "LinearBackoff",
    "ExponentialBackoff",
    "RandomBackoff",
    "ExponentialJitterBackoff",
    # Engine
    "RetryPolicy",
    "Attempt",
    "AttemptOutcome",
    "CancellationToken",
    "current_attempt",
    "RetryEngine",
    "AsyncRetryEngine",
    "Retrier",
    "with_retry",
    "async_with_retry",
    # Exceptions
    "RetryError",
    "InvalidPolicyError",
    "AttemptTimeoutError",
    "DeadlineExceededError",
    "RetryInterruptedError",
    "UnexpectedFailureError",
]
