"""Composition root: long-lived collaborators built once per process."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from typing import Any

import httpx
from fastapi import Request

from backend.app.adapters.geocode import GeocodeClient
from backend.app.adapters.pexels import PexelsClient
from backend.app.adapters.weather import WeatherClient
from backend.app.config import BREAKER_SETTINGS, TIMEOUTS, Settings, secret_value
from backend.app.llm.client import get_llm_client
from backend.app.orchestration.images import DiverseImageFetcher
from backend.app.orchestration.itinerary import ItineraryService
from backend.app.tools.breaker import BreakerRegistry
from backend.app.tools.executor import ResilientExecutor

logger = logging.getLogger(__name__)


@dataclass
class ServiceRegistry:
    """Owns the breakers, the executor, the shared HTTP client and the upstream clients."""

    settings: Settings
    http: httpx.AsyncClient
    breakers: BreakerRegistry
    executor: ResilientExecutor
    itineraries: ItineraryService
    owns_http: bool = True

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        http: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        today: Callable[[], date] = date.today,
    ) -> "ServiceRegistry":
        """Wire every collaborator from ``settings``.

        Args:
            settings: Application settings
            http: Shared httpx client; one is created (and later closed) if omitted
            clock: Monotonic clock for the circuit breakers
            sleep: Sleep used for retry backoff and batch pacing
            today: Date source for itinerary day dates
        """
        owns_http = http is None
        if http is None:
            http = httpx.AsyncClient(timeout=TIMEOUTS.GLOBAL / 1000)

        breakers = BreakerRegistry(BREAKER_SETTINGS, clock=clock)
        executor = ResilientExecutor(breakers, sleep_fn=sleep)

        pexels = PexelsClient(
            http, secret_value(settings.pexels_api_key), base_url=settings.pexels_base_url
        )
        images = DiverseImageFetcher(pexels, executor, sleep=sleep or asyncio.sleep)
        itineraries = ItineraryService(
            executor,
            images,
            llm=get_llm_client(settings, http_client=http),
            geocoder=GeocodeClient(
                http,
                base_url=settings.nominatim_base_url,
                overpass_url=settings.overpass_base_url,
                user_agent=settings.nominatim_user_agent,
            ),
            weather=WeatherClient(
                http,
                secret_value(settings.openweather_api_key),
                base_url=settings.openweather_base_url,
            ),
            today=today,
        )
        logger.info(f"Service registry ready (breakers: {', '.join(BREAKER_SETTINGS)})")
        return cls(
            settings=settings,
            http=http,
            breakers=breakers,
            executor=executor,
            itineraries=itineraries,
            owns_http=owns_http,
        )

    def configured_services(self) -> dict[str, dict[str, Any]]:
        """Which upstreams have credentials. Nominatim needs none."""
        return {
            "perplexity": {"configured": secret_value(self.settings.perplexity_api_key) is not None},
            "pexels": {"configured": secret_value(self.settings.pexels_api_key) is not None},
            "openweather": {
                "configured": secret_value(self.settings.openweather_api_key) is not None
            },
            "nominatim": {"configured": True},
        }

    async def aclose(self) -> None:
        if self.owns_http:
            await self.http.aclose()


def get_services(request: Request) -> ServiceRegistry:
    """FastAPI dependency returning the registry built at startup."""
    services: ServiceRegistry = request.app.state.services
    return services
