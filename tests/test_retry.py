"""Unit tests for retry.py — RetryPolicy and call_with_retry."""

from __future__ import annotations

import asyncio

import pytest

from jina_mcp.errors import EmptyResponseError, ProviderError, ResponseValidationError
from jina_mcp.retry import RetryPolicy, call_with_retry


class _Counter:
    def __init__(self, failures: list[Exception], result="ok"):
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


class TestRetryPolicy:
    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 2
        assert policy.delay >= 0

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_rejects_negative_delay(self):
        with pytest.raises(ValueError):
            RetryPolicy(delay=-1)


class TestCallWithRetry:
    def test_success_first_try(self):
        call = _Counter([])
        assert asyncio.run(call_with_retry(call, RetryPolicy(delay=0))) == "ok"
        assert call.calls == 1

    def test_retries_once_then_succeeds(self):
        call = _Counter([ProviderError("flaky")])
        assert asyncio.run(call_with_retry(call, RetryPolicy(delay=0))) == "ok"
        assert call.calls == 2

    def test_exhausts_attempts_and_reraises_last(self):
        call = _Counter([ProviderError("first"), EmptyResponseError("second")])
        with pytest.raises(EmptyResponseError, match="second"):
            asyncio.run(call_with_retry(call, RetryPolicy(max_attempts=2, delay=0)))
        assert call.calls == 2

    def test_validation_error_not_retried(self):
        call = _Counter([ResponseValidationError("bad shape")])
        with pytest.raises(ResponseValidationError):
            asyncio.run(call_with_retry(call, RetryPolicy(max_attempts=3, delay=0)))
        assert call.calls == 1

    def test_custom_retry_on(self):
        call = _Counter([KeyError("x")])
        policy = RetryPolicy(delay=0, retry_on=(KeyError,))
        assert asyncio.run(call_with_retry(call, policy)) == "ok"
        assert call.calls == 2

    def test_logs_each_failed_attempt(self, caplog):
        call = _Counter([ProviderError("a"), ProviderError("b")])
        with caplog.at_level("WARNING"), pytest.raises(ProviderError):
            asyncio.run(call_with_retry(call, RetryPolicy(delay=0), label="embeddings"))
        assert caplog.text.count("embeddings") == 2
