"""Scoped timing and logging around a named operation."""

import logging
import time
from types import TracebackType

from backend.app.utils.logging import log_structured
from backend.app.utils.metrics import metrics

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """Times one operation and logs its start, progress and outcome.

    Can be used directly (``finish``/``error``) or as a context manager, in
    which case it finishes on normal exit and reports the error otherwise.
    Latency is recorded under the monitor's ``metric`` label when one is given.
    """

    def __init__(self, operation: str, metric: str | None = None) -> None:
        self.operation = operation
        self.metric = metric
        self._start = time.monotonic()
        self._done = False
        log_structured(logger, logging.INFO, f"Starting {operation}", operation=operation)

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self._start) * 1000

    def log(self, message: str) -> None:
        log_structured(
            logger,
            logging.INFO,
            f"{self.operation} ({self.elapsed_ms:.0f}ms): {message}",
            operation=self.operation,
            latency_ms=self.elapsed_ms,
        )

    def finish(self, success: bool = True) -> float:
        """Log completion and return elapsed milliseconds."""
        elapsed = self.elapsed_ms
        self._done = True
        outcome = "success" if success else "empty"
        log_structured(
            logger,
            logging.INFO if success else logging.WARNING,
            f"{self.operation} completed in {elapsed:.0f}ms",
            operation=self.operation,
            outcome=outcome,
            latency_ms=elapsed,
        )
        if self.metric:
            metrics.record_latency(self.metric, outcome, elapsed)
        return elapsed

    def error(self, err: BaseException | str) -> float:
        """Log failure and return elapsed milliseconds."""
        elapsed = self.elapsed_ms
        self._done = True
        reason = err if isinstance(err, str) else type(err).__name__
        log_structured(
            logger,
            logging.WARNING,
            f"{self.operation} failed after {elapsed:.0f}ms: {err}",
            operation=self.operation,
            outcome="error",
            latency_ms=elapsed,
            error_reason=reason,
        )
        if self.metric:
            metrics.record_latency(self.metric, "error", elapsed)
            metrics.inc_error(self.metric, reason)
        return elapsed

    def __enter__(self) -> "PerformanceMonitor":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._done:
            return
        if exc is not None:
            self.error(exc)
        else:
            self.finish(True)

    async def __aenter__(self) -> "PerformanceMonitor":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.__exit__(exc_type, exc, tb)
