"""Exception types raised by the upstream call primitives."""


class OperationTimeoutError(Exception):
    """A single upstream call exceeded its deadline."""

    def __init__(self, operation: str, timeout_ms: int) -> None:
        super().__init__(f"Operation '{operation}' timed out after {timeout_ms}ms")
        self.operation = operation
        self.timeout_ms = timeout_ms


class UpstreamError(Exception):
    """Upstream returned a non-2xx status or an unusable body."""

    def __init__(self, service: str, detail: str, status_code: int | None = None) -> None:
        prefix = f"{service} error" if status_code is None else f"{service} error {status_code}"
        super().__init__(f"{prefix}: {detail}")
        self.service = service
        self.detail = detail
        self.status_code = status_code


class CircuitOpenError(Exception):
    """Circuit breaker is open for this upstream; no call was attempted."""

    def __init__(self, service: str) -> None:
        super().__init__(f"Circuit breaker {service} is OPEN - too many failures")
        self.service = service
