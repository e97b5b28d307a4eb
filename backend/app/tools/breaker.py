"""Per-upstream circuit breaker and the registry that owns them."""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from backend.app.tools.errors import CircuitOpenError
from backend.app.utils.logging import log_structured
from backend.app.utils.metrics import metrics

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BreakerState(str, Enum):
    """Circuit breaker state."""

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


_STATE_GAUGE = {BreakerState.CLOSED: 0, BreakerState.HALF_OPEN: 1, BreakerState.OPEN: 2}


@dataclass
class CircuitBreaker:
    """Per-upstream circuit breaker.

    Counts consecutive failures since the last success. Opens at
    ``failure_threshold``; after ``reset_timeout`` seconds past the last
    failure a single trial call is admitted (HALF_OPEN). The trial's outcome
    either closes the breaker or re-opens it with a fresh failure clock.
    """

    name: str
    failure_threshold: int = 5
    reset_timeout: float = 60.0
    clock: Callable[[], float] = time.monotonic
    state: BreakerState = BreakerState.CLOSED
    failures: int = 0
    last_failure_time: float | None = None
    _trial_in_flight: bool = field(default=False, init=False, repr=False)

    async def execute(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` through the breaker.

        Raises:
            CircuitOpenError: breaker is OPEN (or a HALF_OPEN trial is already
                running); ``operation`` is not invoked.
        """
        self._admit()
        trial = self.state == BreakerState.HALF_OPEN
        if trial:
            self._trial_in_flight = True
        try:
            result = await operation()
        except Exception:
            self.record_failure()
            raise
        finally:
            if trial:
                self._trial_in_flight = False
        self.record_success()
        return result

    def _admit(self) -> None:
        if self.state == BreakerState.OPEN:
            elapsed = self.clock() - (self.last_failure_time or 0.0)
            if elapsed < self.reset_timeout:
                raise CircuitOpenError(self.name)
            self._transition(BreakerState.HALF_OPEN)
        elif self.state == BreakerState.HALF_OPEN and self._trial_in_flight:
            raise CircuitOpenError(self.name)

    def record_success(self) -> None:
        """Reset the failure count; a HALF_OPEN trial closes the breaker."""
        self.failures = 0
        if self.state == BreakerState.HALF_OPEN:
            self._transition(BreakerState.CLOSED)

    def record_failure(self) -> None:
        """Count a failure and open the breaker when warranted."""
        self.failures += 1
        self.last_failure_time = self.clock()
        if self.state == BreakerState.HALF_OPEN or self.failures >= self.failure_threshold:
            self._transition(BreakerState.OPEN)

    def _transition(self, new_state: BreakerState) -> None:
        if new_state == self.state:
            return
        self.state = new_state
        metrics.set_breaker_state(self.name, _STATE_GAUGE[new_state])
        log_structured(
            logger,
            logging.WARNING if new_state == BreakerState.OPEN else logging.INFO,
            f"Circuit breaker {self.name} -> {new_state.value}",
            service=self.name,
            state=new_state.value,
            failures=self.failures,
        )

    def snapshot(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "failures": self.failures,
            "lastFailureTime": self.last_failure_time,
        }


class BreakerRegistry:
    """One breaker per upstream name, shared by every caller of that upstream.

    Constructed once by the composition root and kept for the process
    lifetime.
    """

    def __init__(
        self,
        settings: dict[str, tuple[int, float]] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._settings = settings or {}
        self._clock = clock
        self._by_service: dict[str, CircuitBreaker] = {}

    def get(self, service: str) -> CircuitBreaker:
        """Get existing breaker for service or create one from its settings."""
        if service not in self._by_service:
            threshold, reset_timeout = self._settings.get(service, (5, 60.0))
            self._by_service[service] = CircuitBreaker(
                name=service,
                failure_threshold=threshold,
                reset_timeout=reset_timeout,
                clock=self._clock,
            )
        return self._by_service[service]

    def snapshot(self) -> dict[str, dict[str, Any]]:
        return {name: breaker.snapshot() for name, breaker in self._by_service.items()}
