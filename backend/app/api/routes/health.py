"""Health check endpoints.

- /health: liveness, always ok while the process runs
- /healthz: configured upstreams, circuit breaker snapshots and timeouts
"""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from backend.app.config import APP_VERSION, BREAKER_SETTINGS, TIMEOUTS
from backend.app.services import ServiceRegistry, get_services
from backend.app.tools.breaker import BreakerState

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz")
async def healthz(services: ServiceRegistry = Depends(get_services)) -> dict[str, Any]:
    """Detailed health report.

    Status is "degraded" when an upstream lacks credentials or its breaker
    is not closed. The service still answers every itinerary request in
    that state, so the response is always 200.
    """
    configured = services.configured_services()
    # Report every known upstream, including breakers not used yet
    breakers = {name: services.breakers.get(name).snapshot() for name in BREAKER_SETTINGS}

    degraded = any(not entry["configured"] for entry in configured.values()) or any(
        snap["state"] != BreakerState.CLOSED.value for snap in breakers.values()
    )
    return {
        "status": "degraded" if degraded else "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
        "services": configured,
        "circuitBreakers": breakers,
        "configuration": {"timeouts": asdict(TIMEOUTS)},
    }
