"""
Per-attempt records, per-execution state and cancellation tokens.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum


class AttemptOutcome(str, Enum):
    """How a single attempt ended."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


class ExecutionPhase(str, Enum):
    """Lifecycle of one execute() call. The last three are terminal."""

    PENDING = "pending"
    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class CancellationToken:
    """
    Thread-safe one-way cancellation flag.

    Once cancelled a token stays cancelled. Waiters are woken through
    callbacks registered with `subscribe`, so nothing has to poll.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation and wake every subscriber."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or `timeout` elapses. Returns the cancelled state."""
        return self._event.wait(timeout)

    @contextmanager
    def subscribe(self, callback: Callable[[], None]) -> Iterator[None]:
        """
        Call `callback` on cancellation while the context is active.

        If the token is already cancelled the callback runs immediately.
        """
        with self._lock:
            registered = not self._event.is_set()
            if registered:
                self._callbacks.append(callback)
        if not registered:
            callback()
        try:
            yield
        finally:
            if registered:
                with self._lock:
                    self._callbacks.remove(callback)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


@dataclass
class Attempt:
    """One invocation of the operation within a single execute() call."""

    number: int
    started_at: float
    outcome: AttemptOutcome = AttemptOutcome.PENDING
    error: BaseException | None = None
    token: CancellationToken = field(default_factory=CancellationToken)

    @property
    def cancelled(self) -> bool:
        """True once the engine has abandoned this attempt."""
        return self.token.cancelled


@dataclass
class ExecutionState:
    """Mutable bookkeeping owned by exactly one execute() call."""

    started_at: float
    attempt: int = 0
    last_failure: BaseException | None = None
    phase: ExecutionPhase = ExecutionPhase.PENDING


_current_attempt: ContextVar[Attempt | None] = ContextVar("nanoretry_attempt", default=None)


def current_attempt() -> Attempt | None:
    """
    Return the attempt the calling operation is running as.

    Operations can watch `current_attempt().token` to stop early once the
    engine has abandoned them after a timeout. Returns None outside of an
    engine-run operation.
    """
    return _current_attempt.get()


def bind_attempt(attempt: Attempt) -> None:
    """Make `attempt` visible to current_attempt() in the running context."""
    _current_attempt.set(attempt)
