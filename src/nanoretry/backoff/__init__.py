"""
nanoretry - Backoff Strategies.

Pure functions from attempt number to wait duration.
"""

from .strategies import (
    Backoff,
    FixedBackoff,
    LinearBackoff,
    ExponentialBackoff,
    RandomBackoff,
    ExponentialJitterBackoff,
)

__all__ = [
    "Backoff",
    "FixedBackoff",
    "LinearBackoff",
    "ExponentialBackoff",
    "RandomBackoff",
    "ExponentialJitterBackoff",
]
