"""Itinerary assembly: AI generation with deterministic fallback.

Stages return ``Ok``/``Err`` and the service matches on them to choose the
next stage:

    AI configured? -> complete -> repair-parse -> validate -> Ok(document)
                  \\_______ any Err ________________________/
                                     |
                          deterministic generation

Either path is then normalized and enriched with weather and images. No
upstream failure reaches the caller; degraded paths are disclosed in the
document metadata.
"""

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any

from pydantic import ValidationError

from backend.app.adapters.geocode import SERVICE_NAME as GEOCODE_SERVICE
from backend.app.adapters.geocode import GeocodeClient
from backend.app.adapters.weather import SERVICE_NAME as WEATHER_SERVICE
from backend.app.adapters.weather import WeatherClient
from backend.app.config import (
    AI_RETRY_ATTEMPTS,
    AI_RETRY_BASE_DELAY_MS,
    LOOKUP_RETRY_ATTEMPTS,
    LOOKUP_RETRY_BASE_DELAY_MS,
    MAX_LOCATION_IMAGES,
    TIMEOUTS,
)
from backend.app.llm.client import SERVICE_NAME as AI_SERVICE
from backend.app.llm.client import LLMClient
from backend.app.llm.prompts import build_itinerary_prompt
from backend.app.llm.repair import parse_model_json
from backend.app.models.common import Geo, PlaceCategory
from backend.app.models.images import LocationImage
from backend.app.models.itinerary import (
    GenerationMetadata,
    ItineraryDocument,
    ItineraryRequest,
)
from backend.app.models.result import Err, FailureReason, Ok, StageResult
from backend.app.models.tool_results import WeatherDay
from backend.app.orchestration.fallback import (
    city_config,
    generate_fallback_itinerary,
    normalize_itinerary,
)
from backend.app.orchestration.images import DiverseImageFetcher, get_fallback_city_image
from backend.app.orchestration.templates import CITY_DAY_TEMPLATES, seasonal_weather
from backend.app.tools.executor import ResilientExecutor
from backend.app.tools.monitor import PerformanceMonitor
from backend.app.tools.retry import OperationSpec, RetryPolicy
from backend.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

AI_VERSION = "2.0.0"
FALLBACK_VERSION = "2.0.0-fallback"
FALLBACK_MODEL = "fallback-enhanced"

AI_GENERATION = OperationSpec(
    name="perplexity-completion",
    timeout_ms=TIMEOUTS.AI,
    retry=RetryPolicy(AI_RETRY_ATTEMPTS, AI_RETRY_BASE_DELAY_MS),
)
GEOCODE_LOOKUP = OperationSpec(
    name="nominatim-geocode",
    timeout_ms=TIMEOUTS.GEOCODE,
    retry=RetryPolicy(LOOKUP_RETRY_ATTEMPTS, LOOKUP_RETRY_BASE_DELAY_MS),
)
POI_LOOKUP = OperationSpec(
    name="overpass-poi",
    timeout_ms=TIMEOUTS.GEOCODE,
    retry=RetryPolicy(LOOKUP_RETRY_ATTEMPTS, LOOKUP_RETRY_BASE_DELAY_MS),
)
WEATHER_FORECAST = OperationSpec(
    name="openweather-forecast",
    timeout_ms=TIMEOUTS.WEATHER,
    retry=RetryPolicy(LOOKUP_RETRY_ATTEMPTS, LOOKUP_RETRY_BASE_DELAY_MS),
)

# Keys the model sometimes echoes back that the service owns
_SERVER_OWNED_KEYS = ("metadata", "locationImages", "location_images")


@dataclass
class TripContext:
    """Upstream lookups gathered before generation. Every field is optional."""

    geo: Geo | None = None
    points_of_interest: list[str] = field(default_factory=list)
    forecast: list[WeatherDay] = field(default_factory=list)


def validate_itinerary(data: dict[str, Any]) -> StageResult[ItineraryDocument]:
    """Structure check for parsed model output.

    ``days`` must be a list holding at least one day object that survives
    coercion. Unreadable entries inside an otherwise usable document are
    dropped rather than failing the whole document.
    """
    payload = {k: v for k, v in data.items() if k not in _SERVER_OWNED_KEYS}
    days = payload.get("days")
    if not isinstance(days, list) or not any(isinstance(day, dict) for day in days):
        logger.warning("AI itinerary has no day objects")
        return Err(FailureReason.INVALID_STRUCTURE, "days must be a list of day objects")
    try:
        return Ok(ItineraryDocument.model_validate(payload))
    except ValidationError as e:
        logger.warning(f"AI itinerary failed validation: {e.error_count()} error(s)")
        return Err(FailureReason.INVALID_STRUCTURE, str(e), e)


def location_names(document: ItineraryDocument, city: str) -> list[str]:
    """City first, then every distinct location, capped for image search."""
    names = list(dict.fromkeys([city, *document.location_names()]))
    return names[:MAX_LOCATION_IMAGES]


def image_categories(document: ItineraryDocument, city: str) -> dict[str, PlaceCategory]:
    """Known categories: dining places are food and the city is a city."""
    tags = {
        meal.location.name: PlaceCategory.food
        for day in document.days
        for meal in day.dining
        if meal.location and meal.location.name
    }
    tags[city] = PlaceCategory.city
    return tags


class ItineraryService:
    """Builds itinerary documents; owns no state beyond its collaborators."""

    def __init__(
        self,
        executor: ResilientExecutor,
        images: DiverseImageFetcher,
        llm: LLMClient | None = None,
        geocoder: GeocodeClient | None = None,
        weather: WeatherClient | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize service.

        Args:
            executor: Resilient executor shared by every upstream call
            images: Location image collector
            llm: AI client; None when no credential is configured
            geocoder: Geocoding/POI client; None disables lookups
            weather: Forecast client; None or unconfigured means seasonal weather
            today: Date source for day dates and seasonal weather
        """
        self.executor = executor
        self.images = images
        self.llm = llm
        self.geocoder = geocoder
        self.weather = weather
        self.today = today

    async def generate(
        self, request: ItineraryRequest, request_id: str | None = None
    ) -> ItineraryDocument:
        """Full chain: AI generation, fallback, normalization, enrichment."""
        monitor = PerformanceMonitor("Complete itinerary generation")
        request_id = request_id or str(uuid.uuid4())
        monitor.log(
            f"Processing request for {request.days}-day trip to {request.city} "
            f"with budget {request.budget}"
        )
        start = self.today()
        context = await self._gather_context(request)

        result = await self._generate_with_ai(request, context, start)
        match result:
            case Ok(value=document):
                source, fallback_reason = "ai", None
                monitor.log("AI itinerary parsed and validated")
            case Err(reason=reason, detail=detail):
                source, fallback_reason = "fallback", reason.value
                metrics.inc_fallback(reason.value)
                monitor.log(f"AI generation unavailable ({reason.value}: {detail}), using fallback")
                document = generate_fallback_itinerary(
                    request.city,
                    request.days,
                    request.budget,
                    start_date=start,
                    points_of_interest=context.points_of_interest,
                    include_cultural_tips=request.include_cultural_tips,
                )

        document = normalize_itinerary(
            document,
            request.city,
            request.days,
            request.budget,
            start_date=start,
            include_cultural_tips=request.include_cultural_tips,
        )
        document, weather_source = self._apply_weather(
            document, request, context.forecast, keep_existing=source == "ai"
        )

        images, images_fallback = await self._collect_images(document, request)
        monitor.log(f"Attached {len(images)} location image(s)")

        metrics.inc_generation(source)
        metadata = GenerationMetadata(
            generated_at=datetime.now(timezone.utc),
            request_id=request_id,
            processing_time=round(monitor.elapsed_ms),
            ai_model=self.llm.model if source == "ai" and self.llm else FALLBACK_MODEL,
            generation_source=source,
            fallback_reason=fallback_reason,
            images_fallback=images_fallback,
            image_count=len(images),
            city_config="enhanced" if city_config(request.city) else "standard",
            weather_source=weather_source,
            version=AI_VERSION if source == "ai" else FALLBACK_VERSION,
        )
        monitor.finish(True)
        return document.model_copy(update={"location_images": images, "metadata": metadata})

    def generate_fallback(
        self, request: ItineraryRequest, request_id: str | None = None
    ) -> ItineraryDocument:
        """Deterministic itinerary with the curated city image; no upstream calls."""
        monitor = PerformanceMonitor("Fallback itinerary generation")
        start = self.today()
        document = generate_fallback_itinerary(
            request.city,
            request.days,
            request.budget,
            start_date=start,
            include_cultural_tips=request.include_cultural_tips,
        )
        document, weather_source = self._apply_weather(document, request, [])
        images = {request.city: get_fallback_city_image(request.city)}

        metrics.inc_fallback("requested")
        metrics.inc_generation("fallback")
        metadata = GenerationMetadata(
            generated_at=datetime.now(timezone.utc),
            request_id=request_id or str(uuid.uuid4()),
            processing_time=round(monitor.elapsed_ms),
            ai_model=FALLBACK_MODEL,
            generation_source="fallback",
            fallback_reason="requested",
            images_fallback=True,
            image_count=len(images),
            city_config="enhanced" if city_config(request.city) else "standard",
            weather_source=weather_source,
            version=FALLBACK_VERSION,
        )
        monitor.finish(True)
        return document.model_copy(update={"location_images": images, "metadata": metadata})

    async def _generate_with_ai(
        self, request: ItineraryRequest, context: TripContext, start: date
    ) -> StageResult[ItineraryDocument]:
        if self.llm is None:
            return Err(FailureReason.UNCONFIGURED, "AI provider API key not configured")

        llm = self.llm
        weather_notes = [
            f"{day.date.isoformat()}: {day.as_text()}" for day in context.forecast
        ]
        prompt = build_itinerary_prompt(request, today=start, weather_notes=weather_notes)

        completion = await self.executor.attempt(
            AI_SERVICE, AI_GENERATION, lambda: llm.complete(prompt)
        )
        match completion:
            case Ok(value=text):
                parsed = parse_model_json(text)
            case Err() as err:
                return err

        match parsed:
            case Ok(value=data):
                return validate_itinerary(data)
            case Err() as err:
                return err

    async def _gather_context(self, request: ItineraryRequest) -> TripContext:
        """Geocode the city when a forecast or sights are wanted.

        Sights are only looked up for cities without a template table. Every
        lookup failure leaves the corresponding field empty.
        """
        context = TripContext()
        wants_forecast = bool(
            request.include_weather and self.weather is not None and self.weather.configured
        )
        wants_sights = request.city.lower() not in CITY_DAY_TEMPLATES
        if self.geocoder is None or not (wants_forecast or wants_sights):
            return context

        geocoder = self.geocoder
        match await self.executor.attempt(
            GEOCODE_SERVICE, GEOCODE_LOOKUP, lambda: geocoder.geocode(request.city)
        ):
            case Ok(value=None):
                logger.info(f"No coordinates for {request.city}")
                return context
            case Ok(value=place):
                context.geo = place.geo
            case Err(reason=reason, detail=detail):
                logger.warning(f"Geocoding {request.city} failed ({reason.value}): {detail}")
                return context

        geo = context.geo
        if wants_sights:
            match await self.executor.attempt(
                GEOCODE_SERVICE, POI_LOOKUP, lambda: geocoder.points_of_interest(geo)
            ):
                case Ok(value=names):
                    context.points_of_interest = names
                case Err(reason=reason, detail=detail):
                    logger.warning(f"Sight lookup failed ({reason.value}): {detail}")

        if wants_forecast:
            weather = self.weather
            match await self.executor.attempt(
                WEATHER_SERVICE, WEATHER_FORECAST, lambda: weather.forecast(geo)
            ):
                case Ok(value=days):
                    context.forecast = days
                case Err(reason=reason, detail=detail):
                    logger.warning(f"Forecast unavailable ({reason.value}): {detail}")
        return context

    def _apply_weather(
        self,
        document: ItineraryDocument,
        request: ItineraryRequest,
        forecast: list[WeatherDay],
        keep_existing: bool = False,
    ) -> tuple[ItineraryDocument, str]:
        """Write per-day weather text from the forecast or the seasonal table.

        Forecast text always wins. Seasonal text replaces the template
        placeholder, and only fills gaps in AI-written days.
        """
        if not request.include_weather:
            return document, "none"

        by_date = {day.date.isoformat(): day for day in forecast}
        seasonal = seasonal_weather(self.today().month)
        used_forecast = False
        days = []
        for plan in document.days:
            forecast_day = by_date.get(plan.date)
            if forecast_day is not None:
                text = forecast_day.as_text()
                used_forecast = True
            elif keep_existing and plan.weather:
                text = plan.weather
            else:
                text = seasonal
            days.append(plan.model_copy(update={"weather": text}))
        return document.model_copy(update={"days": days}), (
            "forecast" if used_forecast else "seasonal"
        )

    async def _collect_images(
        self, document: ItineraryDocument, request: ItineraryRequest
    ) -> tuple[dict[str, LocationImage], bool]:
        """Location images, or the curated city image when none could be fetched."""
        names = location_names(document, request.city)
        try:
            images = await self.images.fetch(
                names, request.image_size, image_categories(document, request.city)
            )
        except Exception as e:
            logger.warning(f"Image collection failed: {e}")
            images = {}
        if images:
            return images, False
        logger.info(f"No location images, using fallback image for {request.city}")
        return {request.city: get_fallback_city_image(request.city)}, True
