"""
Asyncio retry engine.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..exceptions import AttemptTimeoutError, RetryInterruptedError
from .attempt import Attempt, AttemptOutcome, ExecutionPhase, bind_attempt
from .base import BaseRetryEngine
from .policy import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _call_as(attempt: Attempt, operation: Callable[[], Awaitable[T]]) -> T:
    bind_attempt(attempt)
    return await operation()


def _log_abandoned_result(task: asyncio.Task) -> None:
    if not task.cancelled() and task.exception() is not None:
        logger.debug(f"Abandoned attempt finished with {task.exception()!r}")


class AsyncRetryEngine(BaseRetryEngine):
    """
    Asyncio retry engine.

    Each attempt runs as its own task so its duration can be bounded. A
    timed-out task is cancelled but never awaited; the engine moves on
    immediately. Cancelling the task that awaits execute() abandons the
    in-flight attempt and re-raises CancelledError.
    """

    def __init__(self, policy: RetryPolicy | None = None):
        super().__init__(policy)
        # Strong references to this engine's abandoned attempts until they finish
        self._abandoned: set[asyncio.Task] = set()

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run `operation` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument coroutine function invoked once per attempt

        Returns:
            The value of the first successful attempt

        Raises:
            DeadlineExceededError: If the deadline passed before an attempt could start
            asyncio.CancelledError: If the calling task was cancelled
            Exception: The last failure, once retries are exhausted or it is not retryable
        """
        state = self._start()

        while state.attempt < self.policy.max_attempts:
            attempt = self._begin_attempt(state)
            task = asyncio.create_task(_call_as(attempt, operation))
            try:
                await asyncio.wait(
                    {task}, timeout=self._bounded(self.policy.attempt_timeout)
                )
            except asyncio.CancelledError:
                self._abandon(attempt, task)
                self._record_failure(
                    state,
                    attempt,
                    RetryInterruptedError(
                        f"Cancelled while waiting for attempt {attempt.number}",
                        attempts=attempt.number,
                    ),
                    AttemptOutcome.CANCELLED,
                )
                state.phase = ExecutionPhase.FAILED
                logger.warning(f"Cancelled while waiting for attempt {attempt.number}")
                raise

            if task.done():
                if task.cancelled():
                    self._record_failure(state, attempt, asyncio.CancelledError())
                elif task.exception() is not None:
                    self._record_failure(state, attempt, task.exception())
                else:
                    self._succeed(state, attempt)
                    return task.result()
            else:
                self._abandon(attempt, task)
                timeout = self.policy.attempt_timeout
                self._record_failure(
                    state,
                    attempt,
                    AttemptTimeoutError(
                        f"Attempt {attempt.number} exceeded {timeout}s",
                        timeout=timeout,
                        attempts=attempt.number,
                    ),
                    AttemptOutcome.TIMED_OUT,
                )

            delay = self._next_delay(state)
            if delay is None:
                break
            try:
                await asyncio.sleep(self._bounded(delay))
            except asyncio.CancelledError:
                state.phase = ExecutionPhase.FAILED
                logger.warning(f"Cancelled during backoff after attempt {state.attempt}")
                raise

        self._give_up(state)

    def _abandon(self, attempt: Attempt, task: asyncio.Task) -> None:
        attempt.token.cancel()
        task.cancel()
        self._abandoned.add(task)
        task.add_done_callback(self._abandoned.discard)
        task.add_done_callback(_log_abandoned_result)
        logger.debug(f"Attempt {attempt.number} abandoned")
