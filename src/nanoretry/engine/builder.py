"""
Fluent retry configuration.

Every `with_*` call returns a new Retrier, so a configured Retrier can be
shared and reused without one caller's changes leaking into another's.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from ..backoff import Backoff
from ..exceptions import InvalidPolicyError
from .aio import AsyncRetryEngine
from .attempt import CancellationToken
from .policy import RetryPolicy
from .sync import RetryEngine

T = TypeVar("T")


@dataclass(frozen=True)
class Retrier(Generic[T]):
    """
    An operation bound to a retry policy.

    Example:
        result = (
            Retrier.of(lambda: client.call())
            .with_max_attempts(3)
            .with_backoff(Backoff.exponential(0.1, 2.0))
            .retry_on(ConnectionError)
            .with_timeout(5.0)
            .execute()
        )
    """

    operation: Callable[[], Any]
    policy: RetryPolicy = field(default_factory=RetryPolicy)
    interrupt: CancellationToken | None = None

    @classmethod
    def of(cls, operation: Callable[[], T]) -> "Retrier[T]":
        """Bind `operation`; a callable returning None is a side-effect-only operation."""
        return cls(operation)

    def with_policy(self, policy: RetryPolicy) -> "Retrier[T]":
        return replace(self, policy=policy)

    def with_max_attempts(self, max_attempts: int) -> "Retrier[T]":
        """Total number of attempts, including the first."""
        return replace(self, policy=replace(self.policy, max_attempts=max_attempts))

    def with_backoff(self, backoff: Backoff) -> "Retrier[T]":
        return replace(self, policy=replace(self.policy, backoff=backoff))

    def retry_on(self, *kinds: type[BaseException]) -> "Retrier[T]":
        """Add exception types that trigger a retry. Without any, every failure is retried."""
        return replace(self, policy=self.policy.with_retry_on(kinds))

    def with_timeout(self, seconds: float | None) -> "Retrier[T]":
        """Global deadline covering every attempt and backoff wait."""
        return replace(self, policy=replace(self.policy, deadline=seconds))

    def with_per_attempt_timeout(self, seconds: float | None) -> "Retrier[T]":
        return replace(self, policy=replace(self.policy, attempt_timeout=seconds))

    def with_interrupt(self, token: CancellationToken | None) -> "Retrier[T]":
        """Token that interrupts a blocking execute() while it waits."""
        return replace(self, interrupt=token)

    def execute(self) -> T:
        """Run the operation on the calling thread's behalf. See RetryEngine.execute."""
        return RetryEngine(self.policy, interrupt=self.interrupt).execute(self.operation)

    async def execute_async(self) -> T:
        """
        Run a coroutine-function operation. See AsyncRetryEngine.execute.

        Asyncio callers interrupt by cancelling the awaiting task, so a token
        set through with_interrupt() is rejected here rather than ignored.

        Raises:
            InvalidPolicyError: If an interrupt token is configured
        """
        if self.interrupt is not None:
            raise InvalidPolicyError(
                "with_interrupt() only applies to execute(); cancel the awaiting task instead"
            )
        return await AsyncRetryEngine(self.policy).execute(self.operation)
