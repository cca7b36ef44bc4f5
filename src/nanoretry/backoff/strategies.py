"""
Backoff strategies.

A strategy maps a 1-based attempt number to the number of seconds to wait
before the next attempt. Strategies are stateless and may be shared freely
between concurrent executions.
"""

import random
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..exceptions import InvalidPolicyError

# Largest finite delay; exponential growth saturates here instead of overflowing
MAX_DELAY = sys.float_info.max


def _exponential(initial: float, multiplier: float, attempt: int) -> float:
    if initial == 0:
        return 0.0
    try:
        return min(initial * (multiplier ** (attempt - 1)), MAX_DELAY)
    except OverflowError:
        return MAX_DELAY


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise InvalidPolicyError(f"{name} must be >= 0, got {value!r}")


class Backoff(ABC):
    """
    Abstract base class for backoff strategies.

    Subclasses implement `_delay`; callers use `next_delay`, which validates
    the attempt number first.
    """

    def next_delay(self, attempt: int) -> float:
        """
        Calculate the delay before the attempt following `attempt`.

        Args:
            attempt: The attempt that just failed (1-based)

        Returns:
            Delay in seconds, never negative

        Raises:
            InvalidPolicyError: If attempt is not a positive integer
        """
        if isinstance(attempt, bool) or not isinstance(attempt, int):
            raise InvalidPolicyError(f"attempt must be an int, got {type(attempt).__name__}")
        if attempt < 1:
            raise InvalidPolicyError(f"attempt must be >= 1, got {attempt}")
        return self._delay(attempt)

    @abstractmethod
    def _delay(self, attempt: int) -> float:
        ...

    @classmethod
    def fixed(cls, delay: float) -> "FixedBackoff":
        """Constant delay between every attempt."""
        return FixedBackoff(delay)

    @classmethod
    def linear(cls, initial: float, step: float) -> "LinearBackoff":
        """Delay grows by `step` after every attempt."""
        return LinearBackoff(initial, step)

    @classmethod
    def exponential(cls, initial: float, multiplier: float) -> "ExponentialBackoff":
        """Delay is multiplied by `multiplier` after every attempt."""
        return ExponentialBackoff(initial, multiplier)

    @classmethod
    def random(cls, min_delay: float, max_delay: float) -> "RandomBackoff":
        """Uniformly random delay within [min_delay, max_delay]."""
        return RandomBackoff(min_delay, max_delay)

    @classmethod
    def exponential_with_jitter(
        cls, initial: float, multiplier: float
    ) -> "ExponentialJitterBackoff":
        """Full jitter: uniformly random delay within [0, exponential cap]."""
        return ExponentialJitterBackoff(initial, multiplier)


@dataclass(frozen=True)
class FixedBackoff(Backoff):
    """delay = delay"""

    delay: float = 0.0

    def __post_init__(self):
        _require_non_negative("delay", self.delay)

    def _delay(self, attempt: int) -> float:
        return self.delay


@dataclass(frozen=True)
class LinearBackoff(Backoff):
    """delay = initial + step * (attempt - 1)"""

    initial: float
    step: float

    def __post_init__(self):
        _require_non_negative("initial", self.initial)
        _require_non_negative("step", self.step)

    def _delay(self, attempt: int) -> float:
        return self.initial + self.step * (attempt - 1)


@dataclass(frozen=True)
class ExponentialBackoff(Backoff):
    """delay = initial * multiplier ** (attempt - 1)"""

    initial: float
    multiplier: float = 2.0

    def __post_init__(self):
        _require_non_negative("initial", self.initial)
        _require_non_negative("multiplier", self.multiplier)

    def _delay(self, attempt: int) -> float:
        return _exponential(self.initial, self.multiplier, attempt)


@dataclass(frozen=True)
class RandomBackoff(Backoff):
    """delay = uniform(min_delay, max_delay)"""

    min_delay: float
    max_delay: float

    def __post_init__(self):
        _require_non_negative("min_delay", self.min_delay)
        if self.max_delay < self.min_delay:
            raise InvalidPolicyError(
                "max_delay must be greater than or equal to min_delay "
                f"(got min_delay={self.min_delay!r}, max_delay={self.max_delay!r})"
            )

    def _delay(self, attempt: int) -> float:
        if self.max_delay == self.min_delay:
            return self.min_delay
        return random.uniform(self.min_delay, self.max_delay)


@dataclass(frozen=True)
class ExponentialJitterBackoff(Backoff):
    """delay = uniform(0, initial * multiplier ** (attempt - 1))"""

    initial: float
    multiplier: float = 2.0

    def __post_init__(self):
        _require_non_negative("initial", self.initial)
        _require_non_negative("multiplier", self.multiplier)

    def _delay(self, attempt: int) -> float:
        cap = _exponential(self.initial, self.multiplier, attempt)
        if cap <= 0:
            return 0.0
        return random.uniform(0.0, cap)
