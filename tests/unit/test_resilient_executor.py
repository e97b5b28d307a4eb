"""Unit tests for the resilient executor (breaker + retry + timeout)."""

import asyncio
from typing import Any

import httpx
import pytest

from backend.app.adapters.pexels import PexelsClient
from backend.app.models.result import Err, FailureReason, Ok
from backend.app.tools.breaker import BreakerRegistry, BreakerState
from backend.app.tools.errors import CircuitOpenError, OperationTimeoutError, UpstreamError
from backend.app.tools.executor import ResilientExecutor, classify_failure
from backend.app.tools.retry import OperationSpec, RetryPolicy

TEST_OP = OperationSpec(name="test-op", timeout_ms=50, retry=RetryPolicy(3, 100))


@pytest.fixture
def executor(sleep_recorder: Any, fake_clock: Any) -> ResilientExecutor:
    registry = BreakerRegistry({"svc": (2, 30.0)}, clock=fake_clock)
    return ResilientExecutor(registry, sleep_fn=sleep_recorder)


@pytest.mark.asyncio
async def test_success_passes_value_through(executor: ResilientExecutor) -> None:
    async def request() -> int:
        return 42

    assert await executor.call("svc", TEST_OP, request) == 42


@pytest.mark.asyncio
async def test_breaker_sees_one_failure_per_retried_call(
    executor: ResilientExecutor, sleep_recorder: Any
) -> None:
    """Three failed attempts count once against the breaker."""
    calls = 0

    async def request() -> None:
        nonlocal calls
        calls += 1
        raise UpstreamError("svc", "bad gateway", 502)

    with pytest.raises(UpstreamError):
        await executor.call("svc", TEST_OP, request)

    assert calls == 3
    assert sleep_recorder.delays == pytest.approx([0.1, 0.2])
    breaker = executor.breakers.get("svc")
    assert breaker.failures == 1
    assert breaker.state == BreakerState.CLOSED


@pytest.mark.asyncio
async def test_deadline_bounds_each_attempt(executor: ResilientExecutor) -> None:
    attempts = 0

    async def request() -> str:
        nonlocal attempts
        attempts += 1
        if attempts < 3:
            await asyncio.sleep(10)
        return "third attempt"

    assert await executor.call("svc", TEST_OP, request) == "third attempt"
    assert attempts == 3


@pytest.mark.asyncio
async def test_open_breaker_costs_no_call_and_no_retry(
    executor: ResilientExecutor, sleep_recorder: Any
) -> None:
    async def failing() -> None:
        raise UpstreamError("svc", "down", 500)

    for _ in range(2):
        with pytest.raises(UpstreamError):
            await executor.call("svc", TEST_OP, failing)
    assert executor.breakers.get("svc").state == BreakerState.OPEN
    sleeps_before = len(sleep_recorder.delays)

    calls = 0

    async def request() -> str:
        nonlocal calls
        calls += 1
        return "never"

    with pytest.raises(CircuitOpenError):
        await executor.call("svc", TEST_OP, request)
    assert calls == 0
    assert len(sleep_recorder.delays) == sleeps_before


@pytest.mark.asyncio
async def test_attempt_returns_ok(executor: ResilientExecutor) -> None:
    async def request() -> str:
        return "value"

    assert await executor.attempt("svc", TEST_OP, request) == Ok("value")


@pytest.mark.asyncio
async def test_attempt_maps_timeout(executor: ResilientExecutor) -> None:
    async def hang() -> None:
        await asyncio.sleep(10)

    result = await executor.attempt("svc", TEST_OP, hang)
    assert isinstance(result, Err)
    assert result.reason == FailureReason.TIMEOUT
    assert isinstance(result.error, OperationTimeoutError)


@pytest.mark.asyncio
async def test_attempt_maps_open_breaker(executor: ResilientExecutor, fake_clock: Any) -> None:
    breaker = executor.breakers.get("svc")
    breaker.record_failure()
    breaker.record_failure()

    async def request() -> str:
        return "unused"

    result = await executor.attempt("svc", TEST_OP, request)
    assert isinstance(result, Err)
    assert result.reason == FailureReason.BREAKER_OPEN


@pytest.mark.parametrize(
    ("error", "reason"),
    [
        (CircuitOpenError("svc"), FailureReason.BREAKER_OPEN),
        (OperationTimeoutError("op", 10), FailureReason.TIMEOUT),
        (httpx.ReadTimeout("read timed out"), FailureReason.TIMEOUT),
        (UpstreamError("svc", "bad", 500), FailureReason.UPSTREAM_ERROR),
        (ValueError("anything else"), FailureReason.UPSTREAM_ERROR),
    ],
)
def test_classify_failure(error: Exception, reason: FailureReason) -> None:
    assert classify_failure(error) == reason


@pytest.mark.asyncio
async def test_stalled_socket_is_reported_as_timeout(executor: ResilientExecutor) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        raise httpx.ReadTimeout("read timed out", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    pexels = PexelsClient(http, "pexels-key")

    result = await executor.attempt("svc", TEST_OP, lambda: pexels.search("Delhi"))

    assert isinstance(result, Err)
    assert result.reason == FailureReason.TIMEOUT
    assert isinstance(result.error, OperationTimeoutError)
    assert isinstance(result.error.__cause__, httpx.ReadTimeout)
    assert calls == 3
