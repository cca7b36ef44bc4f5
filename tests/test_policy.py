"""Tests for RetryPolicy - behavior focused."""

import pytest
from nanoretry import ExponentialJitterBackoff, FixedBackoff, RetryPolicy
from nanoretry.exceptions import AttemptTimeoutError, InvalidPolicyError


class TestRetryPolicyDefaults:
    """Test the default configuration."""

    def test_defaults_to_single_attempt(self):
        """Without configuration only the initial call is made."""
        assert RetryPolicy().max_attempts == 1

    def test_defaults_to_zero_fixed_backoff(self):
        """Default backoff waits nothing between attempts."""
        assert RetryPolicy().backoff == FixedBackoff(0.0)

    def test_defaults_to_unbounded_time(self):
        """Neither the deadline nor the per-attempt timeout is bounded by default."""
        policy = RetryPolicy()
        assert policy.deadline is None
        assert policy.attempt_timeout is None


class TestRetryPolicyDecisions:
    """Test should_retry / is_retryable behavior."""

    def test_empty_filter_retries_anything(self):
        """No retry_on kinds means every failure is retryable."""
        policy = RetryPolicy(max_attempts=3)

        assert policy.should_retry(KeyError("x"), 1) is True
        assert policy.should_retry(OSError("x"), 2) is True

    def test_stops_at_max_attempts(self):
        """Reaching max_attempts ends the loop regardless of kind."""
        policy = RetryPolicy(max_attempts=3)

        assert policy.should_retry(OSError("x"), 3) is False

    def test_filter_matches_subclasses(self):
        """retry_on uses isinstance, so subclasses of a kind match."""
        policy = RetryPolicy(max_attempts=3, retry_on=frozenset({OSError}))

        assert policy.should_retry(ConnectionResetError(), 1) is True
        assert policy.should_retry(ValueError(), 1) is False

    def test_timeout_only_retried_when_scoped(self):
        """An attempt timeout goes through the same filter as any failure."""
        narrow = RetryPolicy(max_attempts=3, retry_on=frozenset({OSError}))
        with_timeouts = narrow.with_retry_on([TimeoutError])

        assert narrow.is_retryable(AttemptTimeoutError()) is False
        assert with_timeouts.is_retryable(AttemptTimeoutError()) is True

    def test_with_retry_on_accumulates(self):
        """Adding kinds returns a new policy and leaves the original untouched."""
        base = RetryPolicy(retry_on=frozenset({OSError}))
        extended = base.with_retry_on([KeyError])

        assert extended.retry_on == frozenset({OSError, KeyError})
        assert base.retry_on == frozenset({OSError})


class TestRetryPolicyValidation:
    """Test that invalid policies fail at construction time."""

    @pytest.mark.parametrize("max_attempts", [0, -1])
    def test_rejects_max_attempts_below_one(self, max_attempts):
        """A policy that would never run the operation is rejected."""
        with pytest.raises(InvalidPolicyError, match="no attempt would be made"):
            RetryPolicy(max_attempts=max_attempts)

    def test_rejects_non_backoff(self):
        """backoff must be a Backoff strategy."""
        with pytest.raises(InvalidPolicyError):
            RetryPolicy(backoff=0.5)

    def test_rejects_non_exception_kinds(self):
        """retry_on only accepts exception types."""
        with pytest.raises(InvalidPolicyError):
            RetryPolicy(retry_on=frozenset({"OSError"}))

    def test_rejects_negative_deadline(self):
        with pytest.raises(InvalidPolicyError):
            RetryPolicy(deadline=-1.0)

    def test_rejects_zero_attempt_timeout(self):
        with pytest.raises(InvalidPolicyError):
            RetryPolicy(attempt_timeout=0)

    def test_policy_is_immutable(self):
        """Policies are frozen so they can be shared across executions."""
        policy = RetryPolicy()
        with pytest.raises(AttributeError):
            policy.max_attempts = 5


class TestRetryPolicyPresets:
    """Test preset constructors."""

    def test_aggressive_preset_has_more_attempts(self):
        """Aggressive preset should have more attempts than conservative."""
        assert RetryPolicy.aggressive().max_attempts > RetryPolicy.conservative().max_attempts

    def test_conservative_preset_has_bounded_deadline(self):
        """Conservative preset should cap total time."""
        assert RetryPolicy.conservative().deadline is not None

    def test_no_retry_preset_has_single_attempt(self):
        """No retry preset should make exactly one attempt."""
        assert RetryPolicy.no_retry().max_attempts == 1

    def test_presets_use_jittered_backoff(self):
        """Presets decorrelate concurrent retriers."""
        assert isinstance(RetryPolicy.aggressive().backoff, ExponentialJitterBackoff)
