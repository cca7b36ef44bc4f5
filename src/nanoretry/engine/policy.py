"""
Retry policy definition.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from ..backoff import Backoff, ExponentialJitterBackoff, FixedBackoff
from ..exceptions import InvalidPolicyError


@dataclass(frozen=True)
class RetryPolicy:
    """
    Immutable configuration for one retry execution.

    Attributes:
        max_attempts: Total number of attempts, including the first (default: 1)
        backoff: Delay strategy between attempts (default: no delay)
        retry_on: Exception types that trigger a retry; empty means any failure
        deadline: Budget in seconds for all attempts and waits (default: unbounded)
        attempt_timeout: Budget in seconds for a single attempt (default: unbounded)
    """

    max_attempts: int = 1
    backoff: Backoff = field(default_factory=FixedBackoff)
    retry_on: frozenset[type[BaseException]] = frozenset()
    deadline: float | None = None
    attempt_timeout: float | None = None

    def __post_init__(self):
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
            raise InvalidPolicyError(
                f"max_attempts must be an int, got {type(self.max_attempts).__name__}"
            )
        if self.max_attempts < 1:
            raise InvalidPolicyError(
                f"max_attempts must be >= 1, got {self.max_attempts}; no attempt would be made"
            )
        if not isinstance(self.backoff, Backoff):
            raise InvalidPolicyError(f"backoff must be a Backoff, got {self.backoff!r}")
        # Accept any iterable of kinds but store a frozenset so the policy stays hashable
        kinds = frozenset(self.retry_on)
        for kind in kinds:
            if not (isinstance(kind, type) and issubclass(kind, BaseException)):
                raise InvalidPolicyError(f"retry_on entries must be exception types, got {kind!r}")
        object.__setattr__(self, "retry_on", kinds)
        if self.deadline is not None and self.deadline < 0:
            raise InvalidPolicyError(f"deadline must be >= 0, got {self.deadline!r}")
        if self.attempt_timeout is not None and self.attempt_timeout <= 0:
            raise InvalidPolicyError(f"attempt_timeout must be > 0, got {self.attempt_timeout!r}")

    def is_retryable(self, error: BaseException) -> bool:
        """Check if the given failure belongs to a retryable kind."""
        if not self.retry_on:
            return True
        return isinstance(error, tuple(self.retry_on))

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Check if another attempt should follow `attempt` after `error`."""
        if attempt >= self.max_attempts:
            return False
        return self.is_retryable(error)

    def with_retry_on(self, kinds: Iterable[type[BaseException]]) -> "RetryPolicy":
        """Return a copy whose retryable kinds also include `kinds`."""
        return replace(self, retry_on=self.retry_on | frozenset(kinds))

    @classmethod
    def aggressive(cls) -> "RetryPolicy":
        """Preset for aggressive retry (more attempts, jittered growth)."""
        return cls(
            max_attempts=10,
            backoff=ExponentialJitterBackoff(initial=0.5, multiplier=2.0),
            deadline=120.0,
        )

    @classmethod
    def conservative(cls) -> "RetryPolicy":
        """Preset for conservative retry (few attempts, short delays)."""
        return cls(
            max_attempts=3,
            backoff=ExponentialJitterBackoff(initial=0.25, multiplier=2.0),
            deadline=10.0,
        )

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        """Preset for no retry (single attempt only)."""
        return cls(max_attempts=1)
