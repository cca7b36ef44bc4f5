"""
Base retry engine.

Holds the policy decisions shared by the synchronous and asyncio engines:
deadline enforcement, failure bookkeeping and terminal failure normalization.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, NoReturn

from ..exceptions import (
    DeadlineExceededError,
    InvalidPolicyError,
    UnexpectedFailureError,
)
from .attempt import Attempt, AttemptOutcome, ExecutionPhase, ExecutionState
from .policy import RetryPolicy

logger = logging.getLogger(__name__)


class BaseRetryEngine(ABC):
    """
    Abstract base class for retry engines.

    An engine is stateless between calls: every execute() creates its own
    ExecutionState, so one engine may serve any number of concurrent callers.
    """

    def __init__(self, policy: RetryPolicy | None = None):
        """
        Initialize the engine.

        Args:
            policy: Retry policy to apply (default: RetryPolicy())
        """
        if policy is not None and not isinstance(policy, RetryPolicy):
            raise InvalidPolicyError(f"policy must be a RetryPolicy, got {policy!r}")
        self.policy = policy or RetryPolicy()

    @abstractmethod
    def execute(self, operation: Any) -> Any:
        """
        Run `operation` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable to invoke once per attempt

        Returns:
            The value of the first successful attempt
        """
        ...

    @staticmethod
    def _clock() -> float:
        return time.monotonic()

    @staticmethod
    def _bounded(seconds: float | None) -> float | None:
        """Clamp a wait to what the threading and asyncio primitives accept."""
        if seconds is None:
            return None
        return min(seconds, threading.TIMEOUT_MAX)

    def _start(self) -> ExecutionState:
        return ExecutionState(started_at=self._clock())

    def _begin_attempt(self, state: ExecutionState) -> Attempt:
        """Advance the counter, enforce the deadline and open a new attempt."""
        state.attempt += 1
        self._check_deadline(state)
        state.phase = ExecutionPhase.ATTEMPTING
        logger.debug(f"Attempt {state.attempt}/{self.policy.max_attempts} starting")
        return Attempt(number=state.attempt, started_at=self._clock())

    def _check_deadline(self, state: ExecutionState) -> None:
        deadline = self.policy.deadline
        if deadline is None:
            return
        elapsed = self._clock() - state.started_at
        if elapsed > deadline:
            state.phase = ExecutionPhase.TIMED_OUT
            made = state.attempt - 1
            logger.error(
                f"Deadline of {deadline:.3f}s exceeded after {made} attempt(s) "
                f"({elapsed:.3f}s elapsed)"
            )
            raise DeadlineExceededError(
                f"Global deadline of {deadline}s exceeded",
                deadline=deadline,
                attempts=made,
            ) from state.last_failure

    def _succeed(self, state: ExecutionState, attempt: Attempt) -> None:
        attempt.outcome = AttemptOutcome.SUCCEEDED
        state.phase = ExecutionPhase.SUCCEEDED
        logger.debug(f"Attempt {attempt.number} succeeded")

    def _record_failure(
        self,
        state: ExecutionState,
        attempt: Attempt,
        error: BaseException,
        outcome: AttemptOutcome = AttemptOutcome.FAILED,
    ) -> None:
        attempt.outcome = outcome
        attempt.error = error
        state.last_failure = error
        logger.debug(f"Attempt {attempt.number} {outcome.value}: {error!r}")

    def _next_delay(self, state: ExecutionState) -> float | None:
        """
        Decide whether to continue after the current failure.

        Returns:
            Seconds to wait before the next attempt, or None to stop
        """
        if not self.policy.should_retry(state.last_failure, state.attempt):
            return None
        delay = self.policy.backoff.next_delay(state.attempt)
        state.phase = ExecutionPhase.BACKING_OFF
        logger.warning(
            f"Retry {state.attempt}/{self.policy.max_attempts - 1}: "
            f"{state.last_failure!r}, waiting {delay:.3f}s"
        )
        return delay

    def _give_up(self, state: ExecutionState) -> NoReturn:
        state.phase = ExecutionPhase.FAILED
        error = state.last_failure
        if state.attempt >= self.policy.max_attempts:
            logger.error(f"All {state.attempt} attempt(s) exhausted: {error!r}")
        else:
            logger.error(f"Giving up after attempt {state.attempt} on non-retryable failure: {error!r}")
        raise self._normalize(error, state.attempt)

    @staticmethod
    def _normalize(error: BaseException | None, attempts: int) -> Exception:
        """Return `error` if it is an Exception, otherwise wrap it in one."""
        if isinstance(error, Exception):
            return error
        if error is None:
            return UnexpectedFailureError("No attempt was made", attempts=attempts)
        wrapped = UnexpectedFailureError(
            f"Operation failed with {type(error).__name__}: {error}",
            attempts=attempts,
        )
        wrapped.__cause__ = error
        return wrapped
