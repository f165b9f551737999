"""Tests for the bounded retry policy."""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.unit

from securefeedback.core.db.retry import RetryPolicy


class _Flaky:
    def __init__(self, failures: int, result="ok"):
        self.failures = failures
        self.calls = 0
        self.result = result

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError(f"attempt {self.calls} failed")
        return self.result


def test_returns_first_success_without_sleeping():
    sleeps: list[float] = []
    policy = RetryPolicy(max_attempts=3, delay_seconds=3.0, sleep=sleeps.append)
    fn = _Flaky(failures=0)

    assert policy.call(fn) == "ok"
    assert fn.calls == 1
    assert sleeps == []


def test_retries_until_success_with_fixed_delay():
    sleeps: list[float] = []
    policy = RetryPolicy(max_attempts=3, delay_seconds=3.0, sleep=sleeps.append)
    fn = _Flaky(failures=2)

    assert policy.call(fn) == "ok"
    assert fn.calls == 3
    assert sleeps == [3.0, 3.0]


def test_reraises_last_failure_after_exhaustion():
    sleeps: list[float] = []
    policy = RetryPolicy(max_attempts=3, delay_seconds=3.0, sleep=sleeps.append)
    fn = _Flaky(failures=10)

    with pytest.raises(ConnectionError, match="attempt 3 failed"):
        policy.call(fn)
    assert fn.calls == 3
    assert sleeps == [3.0, 3.0]


def test_does_not_retry_unlisted_exceptions():
    sleeps: list[float] = []
    policy = RetryPolicy(retry_on=(ConnectionError,), sleep=sleeps.append)

    def _boom():
        raise KeyError("config")

    with pytest.raises(KeyError):
        policy.call(_boom)
    assert sleeps == []


def test_rejects_invalid_bounds():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(delay_seconds=-1)
