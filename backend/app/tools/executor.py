"""Resilient upstream executor: circuit breaker + retry + per-attempt timeout.

Composition for a call against upstream S:

    breaker(S).execute(retry_with_backoff(call_with_timeout(request)))

The breaker sees the outcome of the whole retried operation, so it opens on
sustained failure rather than on one slow attempt absorbed by retry. The
deadline bounds a single attempt: N attempts cost at most N x deadline. An
open breaker costs no network call, no deadline and no retry budget.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx

from backend.app.models.result import Err, FailureReason, Ok, StageResult
from backend.app.tools.breaker import BreakerRegistry
from backend.app.tools.errors import CircuitOpenError, OperationTimeoutError
from backend.app.tools.retry import OperationSpec, retry_with_backoff
from backend.app.tools.timeout import call_with_timeout
from backend.app.utils.metrics import metrics

T = TypeVar("T")

logger = logging.getLogger(__name__)


def classify_failure(error: Exception) -> FailureReason:
    """Map a primitive's exception onto the orchestration failure taxonomy."""
    if isinstance(error, CircuitOpenError):
        return FailureReason.BREAKER_OPEN
    if isinstance(error, OperationTimeoutError | httpx.TimeoutException):
        return FailureReason.TIMEOUT
    return FailureReason.UPSTREAM_ERROR


class ResilientExecutor:
    """Runs upstream requests through the shared breakers."""

    def __init__(
        self,
        breakers: BreakerRegistry,
        sleep_fn: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """Initialize executor.

        Args:
            breakers: Process-wide breaker registry (one breaker per upstream)
            sleep_fn: Injectable sleep used between retries (default: asyncio.sleep)
        """
        self._breakers = breakers
        self._sleep = sleep_fn or asyncio.sleep

    @property
    def breakers(self) -> BreakerRegistry:
        return self._breakers

    async def call(
        self,
        service: str,
        operation: OperationSpec,
        request: Callable[[], Awaitable[T]],
    ) -> T:
        """Execute ``request`` against ``service``.

        Raises:
            CircuitOpenError: breaker for ``service`` is open; nothing was sent
            OperationTimeoutError: the last attempt exceeded ``operation.timeout_ms``
            Exception: the last attempt's own failure, unwrapped
        """

        async def bounded() -> T:
            return await call_with_timeout(request, operation.timeout_ms, operation.name)

        async def retried() -> T:
            return await retry_with_backoff(
                bounded,
                operation.retry.max_attempts,
                operation.retry.base_delay_ms,
                operation.name,
                multiplier=operation.retry.multiplier,
                sleep=self._sleep,
            )

        try:
            return await self._breakers.get(service).execute(retried)
        except CircuitOpenError:
            metrics.inc_error(operation.name, "breaker_open")
            logger.warning(f"{operation.name}: skipped, circuit breaker {service} is open")
            raise

    async def attempt(
        self,
        service: str,
        operation: OperationSpec,
        request: Callable[[], Awaitable[T]],
    ) -> StageResult[T]:
        """Like ``call`` but returns ``Ok``/``Err`` instead of raising."""
        try:
            value = await self.call(service, operation, request)
        except Exception as e:
            return Err(classify_failure(e), str(e), e)
        return Ok(value)
