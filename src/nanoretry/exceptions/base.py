"""
Base exception classes for retry execution.

Each exception carries the number of attempts made so far (when known) and a
class-level `retryable` hint describing whether it makes sense to feed it back
into another retry loop.
"""


class RetryError(Exception):
    """Base exception for all errors raised by the retry engine itself."""

    retryable: bool = False

    def __init__(self, message: str, *, attempts: int | None = None):
        super().__init__(message)
        self.message = message
        self.attempts = attempts

    def __str__(self) -> str:
        if self.attempts is not None:
            return f"{self.message} (attempts: {self.attempts})"
        return self.message


class InvalidPolicyError(RetryError, ValueError):
    """Raised at configuration time when a policy or backoff is malformed."""

    def __init__(self, message: str = "Invalid retry policy", **kwargs):
        super().__init__(message, **kwargs)


class AttemptTimeoutError(RetryError, TimeoutError):
    """Raised when a single attempt exceeds its per-attempt timeout. Retryable."""

    retryable = True

    def __init__(
        self,
        message: str = "Attempt timed out",
        *,
        timeout: float | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class DeadlineExceededError(RetryError, TimeoutError):
    """Raised when the global deadline elapses before an attempt can start. Never retried."""

    def __init__(
        self,
        message: str = "Global deadline exceeded",
        *,
        deadline: float | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.deadline = deadline


class RetryInterruptedError(RetryError):
    """Raised when the caller's cancellation token fires while the engine waits."""

    def __init__(self, message: str = "Retry interrupted", **kwargs):
        super().__init__(message, **kwargs)


class UnexpectedFailureError(RetryError, RuntimeError):
    """Wraps a terminal failure that is not an `Exception` (e.g. SystemExit)."""

    def __init__(self, message: str = "Operation failed", **kwargs):
        super().__init__(message, **kwargs)
