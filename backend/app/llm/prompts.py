"""Prompt construction for itinerary generation."""

import json
from datetime import date

from backend.app.models.itinerary import ItineraryRequest, parse_budget
from backend.app.orchestration.templates import CITY_CONFIGS

SYSTEM_PROMPT = (
    "You are a professional travel planner with access to current information. "
    "Return ONLY a valid JSON object without markdown formatting, explanations or "
    "additional text. Never use trailing commas. Never include text before or after "
    "the JSON object. Include accurate coordinates and realistic pricing."
)

_LOCATION = {"name": "Real place name", "address": "Full address", "coordinates": ["lat", "lng"]}

# Shape the model is asked to return; mirrors ItineraryDocument
ITINERARY_SCHEMA: dict[str, object] = {
    "days": [
        {
            "day": 1,
            "date": "YYYY-MM-DD",
            "summary": "Brief description of the day",
            "weather": "Expected weather conditions",
            "morning": [
                {
                    "time": "9:00 AM",
                    "activity": "Activity description",
                    "location": _LOCATION,
                    "description": "Detailed description with cultural context",
                    "estimatedCost": "₹500-800",
                    "duration": "2-3 hours",
                }
            ],
            "afternoon": ["same shape as morning"],
            "evening": ["same shape as morning"],
            "dining": [
                {
                    "meal": "Breakfast | Lunch | Dinner",
                    "restaurant": "Restaurant name",
                    "cuisine": "Cuisine type",
                    "location": _LOCATION,
                    "price": "₹500-800",
                    "speciality": "Famous dish or specialty",
                    "rating": "4.5/5",
                    "ambiance": "Cozy, family-friendly, etc.",
                    "culturalNote": "Local dining customs",
                }
            ],
        }
    ],
    "summary": {
        "totalCost": "₹45000",
        "costBreakdown": {
            "accommodation": "₹15000",
            "food": "₹12000",
            "activities": "₹10000",
            "transportation": "₹8000",
        },
        "highlights": ["Highlight 1", "Highlight 2"],
        "tips": ["Tip 1", "Tip 2"],
        "culturalTips": ["Cultural tip 1"],
        "bestTime": "Best time to visit",
        "weatherOverview": "General weather information",
        "budgetingTips": ["Budget tip 1"],
    },
}


def adjusted_budget(city: str, budget: str) -> str:
    """Budget scaled by the city's cost multiplier, when the city has one."""
    config = CITY_CONFIGS.get(city.lower())
    if config is None:
        return budget
    return str(round(parse_budget(budget) * config.budget_multiplier))


def build_itinerary_prompt(
    request: ItineraryRequest,
    today: date | None = None,
    weather_notes: list[str] | None = None,
) -> str:
    """User prompt for one itinerary request."""
    today = today or date.today()
    config = CITY_CONFIGS.get(request.city.lower())

    lines = [
        f"Generate a detailed {request.days}-day travel itinerary for {request.city} "
        f"with a budget of ₹{adjusted_budget(request.city, request.budget)}"
        + (f" with interests in: {', '.join(request.interests)}." if request.interests else ".")
    ]

    if request.include_cultural_tips and config:
        lines.append("")
        lines.append("Include these cultural tips in the response:")
        lines.extend(f"- {tip}" for tip in config.cultural_tips)

    if request.include_weather:
        if weather_notes:
            lines.append("")
            lines.append("Weather forecast:")
            lines.extend(f"- {note}" for note in weather_notes)
        elif config:
            lines.append("")
            lines.append(f"Weather information: {config.weather_info}")

    lines.append("")
    lines.append(f"Current date: {today.isoformat()} ({today.strftime('%A, %B %d, %Y')})")
    lines.append(f"Planning period: {request.days} days starting from today")
    lines.append("")
    lines.append("Requirements:")
    lines.append("- Use only real, searchable place names with addresses and coordinates")
    lines.append("- Each day MUST have exactly 3 meals: Breakfast, Lunch, Dinner")
    lines.append("- Morning, afternoon and evening each need at least one activity")
    lines.append(f"- Provide realistic costs in INR based on {request.city} pricing")
    lines.append("")
    lines.append("Return ONLY a valid JSON object with this structure:")
    lines.append(json.dumps(ITINERARY_SCHEMA, indent=2, ensure_ascii=False))
    return "\n".join(lines)
