"""Retry with exponential backoff."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from backend.app.tools.monitor import PerformanceMonitor
from backend.app.utils.logging import log_structured

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try and how long to wait in between."""

    max_attempts: int = 3
    base_delay_ms: int = 1000
    multiplier: float = 2.0

    def delay_ms(self, attempt: int) -> float:
        """Delay after failed ``attempt`` (1-indexed) before the next one."""
        return self.base_delay_ms * self.multiplier ** (attempt - 1)


@dataclass(frozen=True)
class OperationSpec:
    """Per-call-site descriptor: name for logs/metrics, deadline, retry policy."""

    name: str
    timeout_ms: int
    retry: RetryPolicy


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay_ms: int = 1000,
    operation_name: str = "operation",
    *,
    multiplier: float = 2.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds or ``max_attempts`` is reached.

    The wait before attempt k+1 is ``base_delay_ms * multiplier**(k-1)``. Every
    failure type is retried, timeouts included. After the final attempt the
    last error is re-raised as is.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")
    policy = RetryPolicy(max_attempts, base_delay_ms, multiplier)

    async def run(attempt: int) -> T:
        monitor = PerformanceMonitor(
            f"{operation_name} (attempt {attempt}/{max_attempts})", metric=operation_name
        )
        try:
            result = await operation()
        except Exception as e:
            monitor.error(e)
            raise
        monitor.finish(True)
        return result

    for attempt in range(1, max_attempts):
        try:
            return await run(attempt)
        except Exception as e:
            delay = policy.delay_ms(attempt)
            log_structured(
                logger,
                logging.WARNING,
                f"{operation_name} attempt {attempt} failed, retrying in {delay:.0f}ms: {e}",
                operation=operation_name,
                attempt=attempt,
                error_reason=type(e).__name__,
            )
            await sleep(delay / 1000)

    try:
        return await run(max_attempts)
    except Exception as e:
        log_structured(
            logger,
            logging.ERROR,
            f"{operation_name} failed after {max_attempts} attempts: {e}",
            operation=operation_name,
            attempt=max_attempts,
            error_reason=type(e).__name__,
        )
        raise
