"""Models package - re-exports for convenience."""

from backend.app.models.common import CamelModel, Geo, ImageSize, PlaceCategory
from backend.app.models.images import ImageSources, LocationImage
from backend.app.models.itinerary import (
    Activity,
    CostBreakdown,
    DayPlan,
    GenerationMetadata,
    ItineraryDocument,
    ItineraryRequest,
    Location,
    Meal,
    TripSummary,
)
from backend.app.models.result import Err, FailureReason, Ok, StageResult
from backend.app.models.tool_results import GeocodedPlace, WeatherDay

__all__ = [
    # Common
    "CamelModel",
    "Geo",
    "ImageSize",
    "PlaceCategory",
    # Images
    "ImageSources",
    "LocationImage",
    # Itinerary
    "ItineraryRequest",
    "ItineraryDocument",
    "DayPlan",
    "Activity",
    "Meal",
    "Location",
    "TripSummary",
    "CostBreakdown",
    "GenerationMetadata",
    # Stage results
    "Ok",
    "Err",
    "FailureReason",
    "StageResult",
    # Tool results
    "GeocodedPlace",
    "WeatherDay",
]
