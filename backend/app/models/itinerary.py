"""Itinerary models - request contract and the document returned to the UI.

Document models are lenient on input: model output varies in shape from one
completion to the next, so recoverable drift (a place given as a bare string,
"Day 1" as a day number, a meal without a label) is coerced rather than
rejected. Entries that cannot be read at all are dropped one by one; only a
document without a single usable day fails validation.
"""

import logging
import re
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from backend.app.config import MAX_TRIP_DAYS, MIN_TRIP_DAYS
from backend.app.models.common import CamelModel, ImageSize
from backend.app.models.images import LocationImage

logger = logging.getLogger(__name__)

MEAL_ORDER = ("Breakfast", "Lunch", "Dinner")
PERIODS = ("morning", "afternoon", "evening")


class ItineraryRequest(CamelModel):
    """Body of POST /api/itinerary."""

    model_config = ConfigDict(extra="ignore")

    city: str = Field(..., min_length=1)
    budget: str
    days: int = Field(..., ge=MIN_TRIP_DAYS, le=MAX_TRIP_DAYS)
    interests: list[str] = Field(default_factory=list)
    include_weather: bool = True
    include_cultural_tips: bool = True
    image_size: ImageSize = ImageSize.medium

    @field_validator("city")
    @classmethod
    def _strip_city(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("city must not be blank")
        return v

    @field_validator("budget", mode="before")
    @classmethod
    def _budget_has_digits(cls, v: object) -> str:
        if isinstance(v, bool) or not isinstance(v, str | int | float):
            raise ValueError("budget must be a number or numeric string")
        text = str(v).strip()
        if not re.search(r"\d", text):
            raise ValueError("budget must contain a numeric amount")
        return text


def parse_budget(budget: str) -> float:
    """Numeric value of a budget string such as "₹50,000" (digits only)."""
    digits = re.sub(r"[^\d]", "", budget)
    return float(digits) if digits else 0.0


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list | tuple):
        return ", ".join(t for t in (_as_text(v) for v in value) if t)
    if isinstance(value, dict):
        return ", ".join(t for t in (_as_text(v) for v in value.values()) if t)
    return str(value)


def _as_text_list(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list | tuple):
        value = [value]
    return [t for t in (_as_text(v) for v in value) if t]


def _as_coordinates(value: Any) -> list[float]:
    """[lat, lon] from a numeric list or a {lat, lon|lng} object; else empty."""
    if isinstance(value, dict):
        lon = value.get("lon", value.get("lng"))
        value = [value.get("lat"), lon]
    if not isinstance(value, list | tuple):
        return []
    try:
        return [float(v) for v in value if not isinstance(v, bool)]
    except (TypeError, ValueError):
        return []


def _as_location(value: Any) -> Any:
    if isinstance(value, str):
        return {"name": value} if value.strip() else None
    if isinstance(value, dict | BaseModel):
        return value
    return None


def _as_day_number(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int | float):
        return int(value)
    match = re.search(r"\d+", value) if isinstance(value, str) else None
    return int(match.group()) if match else 0


def _entries(model: type[BaseModel], wrap_key: str | None = None) -> BeforeValidator:
    """Validate a list entry by entry, dropping the ones that do not fit.

    A bare string entry becomes ``{wrap_key: entry}`` when ``wrap_key`` is
    given. A single object where a list is expected is treated as a list of one.
    """

    def coerce(value: Any) -> list[BaseModel]:
        if value is None:
            return []
        if not isinstance(value, list | tuple):
            value = [value]
        entries = []
        for item in value:
            if wrap_key and isinstance(item, str):
                item = {wrap_key: item}
            try:
                entries.append(model.model_validate(item))
            except ValidationError as e:
                logger.debug(f"Dropping unreadable {model.__name__}: {e.error_count()} error(s)")
        return entries

    return BeforeValidator(coerce)


Text = Annotated[str, BeforeValidator(_as_text)]
TextList = Annotated[list[str], BeforeValidator(_as_text_list)]


class Location(CamelModel):
    name: Text = ""
    address: Text = ""
    coordinates: Annotated[list[float], BeforeValidator(_as_coordinates)] = Field(
        default_factory=list
    )


MaybeLocation = Annotated[Location | None, BeforeValidator(_as_location)]


class Activity(CamelModel):
    time: Text = ""
    activity: Text = ""
    location: MaybeLocation = None
    description: Text = ""
    estimated_cost: Text = ""
    duration: Text = ""


Activities = Annotated[list[Activity], _entries(Activity, "activity")]


class Meal(CamelModel):
    meal: Text = ""
    restaurant: Text = ""
    cuisine: Text = ""
    location: MaybeLocation = None
    price: Text = ""
    speciality: Text = ""
    rating: Text = ""
    ambiance: Text = ""
    cultural_note: Text = ""


class DayPlan(CamelModel):
    day: Annotated[int, BeforeValidator(_as_day_number)] = 0
    date: Text = ""
    summary: Text = ""
    weather: Text = ""
    morning: Activities = Field(default_factory=list)
    afternoon: Activities = Field(default_factory=list)
    evening: Activities = Field(default_factory=list)
    dining: Annotated[list[Meal], _entries(Meal, "restaurant")] = Field(default_factory=list)


class CostBreakdown(CamelModel):
    accommodation: Text = ""
    food: Text = ""
    activities: Text = ""
    transportation: Text = ""


class TripSummary(CamelModel):
    total_cost: Text = ""
    cost_breakdown: CostBreakdown | None = None
    highlights: TextList = Field(default_factory=list)
    tips: TextList = Field(default_factory=list)
    cultural_tips: TextList = Field(default_factory=list)
    best_time: Text = ""
    weather_overview: Text = ""
    budgeting_tips: TextList = Field(default_factory=list)

    @field_validator("cost_breakdown", mode="before")
    @classmethod
    def _breakdown_object(cls, v: Any) -> Any:
        return v if isinstance(v, dict | CostBreakdown) else None


class GenerationMetadata(CamelModel):
    """How the document was produced; exposes any degraded-mode paths taken."""

    generated_at: datetime
    request_id: str
    processing_time: int = Field(..., description="Milliseconds spent generating")
    ai_model: str
    generation_source: Literal["ai", "fallback"]
    fallback_reason: str | None = None
    images_fallback: bool = False
    image_count: int = 0
    city_config: Literal["enhanced", "standard"] = "standard"
    weather_source: Literal["forecast", "seasonal", "none"] = "none"
    version: str


class ItineraryDocument(CamelModel):
    """Complete itinerary output."""

    days: Annotated[list[DayPlan], _entries(DayPlan)] = Field(..., min_length=1)
    summary: TripSummary = Field(default_factory=TripSummary)
    location_images: dict[str, LocationImage] = Field(default_factory=dict)
    metadata: GenerationMetadata | None = None

    @field_validator("summary", mode="before")
    @classmethod
    def _summary_object(cls, v: Any) -> Any:
        return v if isinstance(v, dict | TripSummary) else {}

    def location_names(self) -> list[str]:
        """Distinct location names in activity then dining order."""
        names: list[str] = []
        for day in self.days:
            for period in PERIODS:
                for activity in getattr(day, period):
                    if activity.location and activity.location.name:
                        names.append(activity.location.name)
            for meal in day.dining:
                if meal.location and meal.location.name:
                    names.append(meal.location.name)
        return list(dict.fromkeys(names))
