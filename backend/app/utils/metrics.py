"""Prometheus metrics for upstream calls and itinerary generation."""

from prometheus_client import Counter, Gauge, Histogram

# Upstream call metrics
upstream_latency_ms = Histogram(
    "upstream_latency_ms",
    "Upstream operation latency in milliseconds",
    ["operation", "outcome"],
    buckets=[10, 50, 100, 200, 500, 1000, 2000, 4000, 8000, 15000, 30000],
)

upstream_errors_total = Counter(
    "upstream_errors_total",
    "Total upstream operation errors",
    ["operation", "reason"],
)

circuit_breaker_state = Gauge(
    "circuit_breaker_state",
    "Circuit breaker state per upstream (0=closed, 1=half_open, 2=open)",
    ["service"],
)

# Itinerary metrics
itinerary_generations_total = Counter(
    "itinerary_generations_total",
    "Total itineraries generated",
    ["source"],
)

itinerary_fallbacks_total = Counter(
    "itinerary_fallbacks_total",
    "Total fallbacks to deterministic generation",
    ["reason"],
)


class PrometheusUpstreamMetrics:
    """Prometheus-based upstream metrics implementation."""

    def record_latency(self, operation: str, outcome: str, latency_ms: float) -> None:
        """Record operation latency."""
        upstream_latency_ms.labels(operation=operation, outcome=outcome).observe(latency_ms)

    def inc_error(self, operation: str, reason: str) -> None:
        """Increment error counter."""
        upstream_errors_total.labels(operation=operation, reason=reason).inc()

    def set_breaker_state(self, service: str, value: int) -> None:
        """Publish the current breaker state."""
        circuit_breaker_state.labels(service=service).set(value)

    def inc_generation(self, source: str) -> None:
        itinerary_generations_total.labels(source=source).inc()

    def inc_fallback(self, reason: str) -> None:
        itinerary_fallbacks_total.labels(reason=reason).inc()


metrics = PrometheusUpstreamMetrics()
