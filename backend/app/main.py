"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.itinerary import router as itinerary_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.config import APP_VERSION, Settings, get_settings
from backend.app.services import ServiceRegistry
from backend.app.utils.logging import configure_logging


def create_app(
    settings: Settings | None = None, services: ServiceRegistry | None = None
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to wire from (default: environment)
        services: Prebuilt registry (for tests); built in the lifespan otherwise
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings.log_level)
        registry = services or ServiceRegistry.build(settings)
        app.state.services = registry
        try:
            yield
        finally:
            await registry.aclose()

    app = FastAPI(title="Itinerary Orchestrator API", version=APP_VERSION, lifespan=lifespan)

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(itinerary_router, tags=["itinerary"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "Itinerary Orchestrator API", "version": APP_VERSION}

    return app


app = create_app()
