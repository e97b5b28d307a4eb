"""Deadline-bounded upstream calls."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import httpx

from backend.app.tools.errors import OperationTimeoutError

T = TypeVar("T")


async def call_with_timeout(
    fn: Callable[[], Awaitable[T]],
    timeout_ms: int,
    operation: str = "operation",
) -> T:
    """Run ``fn`` with a deadline.

    On expiry the underlying call is cancelled and OperationTimeoutError is
    raised. Any other failure propagates unchanged, including a TimeoutError
    raised by ``fn`` itself. If the call settles before the deadline its
    result (or error) wins.
    """
    deadline = asyncio.timeout(timeout_ms / 1000)
    try:
        async with deadline:
            return await fn()
    except TimeoutError as e:
        if not deadline.expired():
            raise
        raise OperationTimeoutError(operation, timeout_ms) from e


async def request_with_timeout(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    timeout_ms: int,
    operation: str = "fetch",
    **kwargs: Any,
) -> httpx.Response:
    """Issue one HTTP request bounded by ``timeout_ms``.

    httpx's own timeout is set to the same deadline so a stalled socket is
    released even if the outer wait is not reached.
    """
    kwargs.setdefault("timeout", timeout_ms / 1000)

    async def send() -> httpx.Response:
        return await client.request(method, url, **kwargs)

    try:
        return await call_with_timeout(send, timeout_ms, operation)
    except httpx.TimeoutException as e:
        raise OperationTimeoutError(operation, timeout_ms) from e
