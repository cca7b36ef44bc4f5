"""
nanoretry - Exception Hierarchy.

Failures raised by the retry engine, as opposed to failures raised by the
wrapped operation (which are always re-raised unchanged).
"""

from .base import (
    RetryError,
    InvalidPolicyError,
    AttemptTimeoutError,
    DeadlineExceededError,
    RetryInterruptedError,
    UnexpectedFailureError,
)

__all__ = [
    "RetryError",
    "InvalidPolicyError",
    "AttemptTimeoutError",
    "DeadlineExceededError",
    "RetryInterruptedError",
    "UnexpectedFailureError",
]
