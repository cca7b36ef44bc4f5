"""
Thread-backed retry engine.

Each attempt runs on a worker thread so the calling thread can enforce the
per-attempt timeout with a bounded wait instead of trusting the operation to
stop on its own.
"""

import contextvars
import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import AbstractContextManager, nullcontext
from typing import TypeVar

from ..exceptions import AttemptTimeoutError, RetryInterruptedError
from .attempt import (
    Attempt,
    AttemptOutcome,
    CancellationToken,
    ExecutionPhase,
    ExecutionState,
    bind_attempt,
)
from .base import BaseRetryEngine
from .policy import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _call_as(attempt: Attempt, operation: Callable[[], T]) -> T:
    bind_attempt(attempt)
    return operation()


class RetryEngine(BaseRetryEngine):
    """
    Synchronous retry engine.

    execute() blocks the calling thread until a terminal outcome. A timed-out
    attempt is abandoned, not joined: its worker keeps running until the
    operation returns, and its result is discarded. Python cannot stop a
    thread, so the engine only trips the attempt's cancellation token;
    well-behaved operations check `current_attempt().token` and return early.

    The interrupt token is checked before the attempt's outcome: once it is
    cancelled, a result that arrived in the same window is dropped and the
    attempt is recorded as interrupted.
    """

    def __init__(
        self,
        policy: RetryPolicy | None = None,
        *,
        interrupt: CancellationToken | None = None,
    ):
        """
        Initialize the engine.

        Args:
            policy: Retry policy to apply (default: RetryPolicy())
            interrupt: Caller-owned token that interrupts the engine's waits
        """
        super().__init__(policy)
        self.interrupt = interrupt

    def execute(self, operation: Callable[[], T]) -> T:
        """
        Run `operation` until it succeeds or the policy gives up.

        Args:
            operation: Zero-argument callable invoked once per attempt

        Returns:
            The value of the first successful attempt

        Raises:
            DeadlineExceededError: If the deadline passed before an attempt could start
            RetryInterruptedError: If the interrupt token fired while waiting
            Exception: The last failure, once retries are exhausted or it is not retryable
        """
        state = self._start()
        # One worker per attempt: an abandoned attempt must never delay the next one
        executor = ThreadPoolExecutor(
            max_workers=self.policy.max_attempts,
            thread_name_prefix="nanoretry",
        )
        try:
            while state.attempt < self.policy.max_attempts:
                attempt = self._begin_attempt(state)
                future = executor.submit(
                    contextvars.copy_context().run, _call_as, attempt, operation
                )
                self._wait_for_attempt(future)

                # Interruption wins over a result that raced it
                if self._interrupted():
                    self._abandon(attempt, future)
                    self._record_failure(
                        state,
                        attempt,
                        RetryInterruptedError(
                            f"Interrupted while waiting for attempt {attempt.number}",
                            attempts=attempt.number,
                        ),
                        AttemptOutcome.CANCELLED,
                    )
                elif future.done():
                    error = future.exception()
                    if error is None:
                        self._succeed(state, attempt)
                        return future.result()
                    self._record_failure(state, attempt, error)
                else:
                    self._abandon(attempt, future)
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
                self._sleep(state, delay)

            self._give_up(state)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _interrupted(self) -> bool:
        return self.interrupt is not None and self.interrupt.cancelled

    def _subscribe(self, callback: Callable[[], None]) -> AbstractContextManager:
        if self.interrupt is None:
            return nullcontext()
        return self.interrupt.subscribe(callback)

    def _wait_for_attempt(self, future: Future) -> None:
        """Block until the attempt finishes, times out or the engine is interrupted."""
        wake = threading.Event()
        future.add_done_callback(lambda _: wake.set())
        with self._subscribe(wake.set):
            wake.wait(self._bounded(self.policy.attempt_timeout))

    def _sleep(self, state: ExecutionState, delay: float) -> None:
        """Interruptible backoff wait."""
        wake = threading.Event()
        with self._subscribe(wake.set):
            wake.wait(self._bounded(delay))
        if self._interrupted():
            state.phase = ExecutionPhase.FAILED
            logger.warning(f"Interrupted during backoff after attempt {state.attempt}")
            raise RetryInterruptedError(
                f"Interrupted during backoff after attempt {state.attempt}",
                attempts=state.attempt,
            ) from state.last_failure

    @staticmethod
    def _abandon(attempt: Attempt, future: Future) -> None:
        attempt.token.cancel()
        if not future.cancel():
            logger.debug(f"Attempt {attempt.number} abandoned while still running")
