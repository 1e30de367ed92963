import asyncio

import pytest

from src.core.rate_limiter import RateLimiter
from src.core.request_executor import AIServiceError, ErrorKind, RequestExecutor, classify_error

from conftest import FakeClock, RecordedSleep


def _executor(limiter=None, timeout_seconds=30.0):
    sleep = RecordedSleep()
    limiter = limiter or RateLimiter(max_requests=60, window_ms=60_000, clock=FakeClock())
    return RequestExecutor(
        limiter,
        max_attempts=3,
        retry_delay_seconds=1.0,
        timeout_seconds=timeout_seconds,
        sleep=sleep,
    ), sleep


class Operation:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        outcome = self.outcomes.pop(0) if self.outcomes else RuntimeError("network down")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.mark.asyncio
async def test_transient_failures_retry_with_linear_backoff():
    executor, sleep = _executor()
    operation = Operation(RuntimeError("boom"), RuntimeError("boom"), RuntimeError("boom"))

    with pytest.raises(AIServiceError) as exc_info:
        await executor.execute(operation, "test")

    assert exc_info.value.kind == ErrorKind.REQUEST_FAILED
    assert "after 3 attempts" in exc_info.value.message
    assert operation.calls == 3
    assert sleep.delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_success_after_retry_returns_value():
    executor, sleep = _executor()
    operation = Operation(RuntimeError("flaky"), "ok")

    assert await executor.execute(operation, "test") == "ok"
    assert operation.calls == 2
    assert sleep.delays == [1.0]
    assert executor.rate_limiter.recent_request_count == 2


@pytest.mark.asyncio
async def test_auth_failure_is_not_retried():
    executor, sleep = _executor()
    operation = Operation(RuntimeError("400 API_KEY_INVALID"))

    with pytest.raises(AIServiceError) as exc_info:
        await executor.execute(operation, "test")

    assert exc_info.value.kind == ErrorKind.AUTH_ERROR
    assert exc_info.value.retryable is False
    assert operation.calls == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_quota_failure_propagates_immediately():
    executor, sleep = _executor()
    operation = Operation(RuntimeError("429 RESOURCE_EXHAUSTED"))

    with pytest.raises(AIServiceError) as exc_info:
        await executor.execute(operation, "test")

    assert exc_info.value.kind == ErrorKind.QUOTA_EXCEEDED
    assert operation.calls == 1


@pytest.mark.asyncio
async def test_timed_out_attempts_are_retried():
    executor, sleep = _executor(timeout_seconds=0.01)
    calls = 0

    async def slow_then_fast():
        nonlocal calls
        calls += 1
        if calls == 1:
            await asyncio.sleep(1)
            return "late"
        return "fast"

    assert await executor.execute(slow_then_fast, "test") == "fast"
    assert calls == 2
    assert sleep.delays == [1.0]


@pytest.mark.asyncio
async def test_rate_limited_request_is_rejected_without_calling_provider():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=1, window_ms=60_000, clock=clock)
    limiter.record_request()
    clock.advance(15_500)
    executor, sleep = _executor(limiter=limiter)
    operation = Operation("never")

    with pytest.raises(AIServiceError) as exc_info:
        await executor.execute(operation, "test")

    error = exc_info.value
    assert error.kind == ErrorKind.RATE_LIMIT_EXCEEDED
    assert error.wait_ms == 44_500
    assert error.message == "Rate limit exceeded. Please wait 45 seconds."
    assert operation.calls == 0


def test_classify_error_markers():
    assert classify_error(RuntimeError("PERMISSION_DENIED")) == ErrorKind.AUTH_ERROR
    assert classify_error(RuntimeError("UNAUTHENTICATED request")) == ErrorKind.AUTH_ERROR
    assert classify_error(RuntimeError("QUOTA_EXCEEDED for project")) == ErrorKind.QUOTA_EXCEEDED
    assert classify_error(RuntimeError("connection reset")) is None


def test_error_kind_retryability():
    assert AIServiceError("x", ErrorKind.TIMEOUT).retryable is True
    assert AIServiceError("x", ErrorKind.AUTH_ERROR).retryable is False
    assert AIServiceError("x", ErrorKind.REQUEST_FAILED).retryable is False
