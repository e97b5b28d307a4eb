"""Deterministic itinerary generation and structural normalization.

Pure functions, no I/O. ``generate_fallback_itinerary`` is the terminal
success path of the assembly chain; ``normalize_itinerary`` brings any
document (AI or template) to the guaranteed shape: exactly ``days`` day
entries, three meals each, non-empty activity periods.
"""

from datetime import date, timedelta

from backend.app.models.itinerary import (
    MEAL_ORDER,
    PERIODS,
    Activity,
    CostBreakdown,
    DayPlan,
    ItineraryDocument,
    Location,
    Meal,
    TripSummary,
    parse_budget,
)
from backend.app.orchestration.templates import (
    CITY_CONFIGS,
    CityConfig,
    DayTemplate,
    TemplatePlace,
    day_template,
)

CURRENCY = "₹"

# Share of the budget per cost category
BUDGET_SPLIT = {
    "accommodation": 0.4,
    "food": 0.25,
    "activities": 0.25,
    "transportation": 0.1,
}

_FILLER_MEAL_PRICES = {"Breakfast": "₹200-400", "Lunch": "₹400-800", "Dinner": "₹600-1200"}


def city_config(city: str) -> CityConfig | None:
    return CITY_CONFIGS.get(city.strip().lower())


def _location(place: TemplatePlace) -> Location:
    return Location(
        name=place.name,
        address=place.address,
        coordinates=list(place.coordinates),
    )


def _amount(total: float, share: float = 1.0) -> str:
    return f"{CURRENCY}{round(total * share)}"


def build_summary(
    city: str, budget: str, include_cultural_tips: bool = True
) -> TripSummary:
    """Template trip summary with the budget split across cost categories."""
    config = city_config(city)
    total = parse_budget(budget)
    cultural_tips: list[str] = []
    if include_cultural_tips:
        cultural_tips = (
            list(config.cultural_tips)
            if config
            else [f"Respect local customs and traditions in {city}"]
        )
    return TripSummary(
        total_cost=_amount(total),
        cost_breakdown=CostBreakdown(
            **{key: _amount(total, share) for key, share in BUDGET_SPLIT.items()}
        ),
        highlights=[
            f"Explore the heart of {city}",
            "Experience local culture and cuisine",
            "Visit top attractions and landmarks",
        ],
        tips=[
            "Plan your visits during off-peak hours",
            "Try local transportation",
            "Keep some cash handy for local vendors",
        ],
        cultural_tips=cultural_tips,
        best_time=(
            config.weather_info
            if config
            else f"Research the best time to visit {city} based on weather and tourist seasons"
        ),
        weather_overview=(
            config.weather_info if config else f"Check current weather conditions for {city}"
        ),
        budgeting_tips=[
            "Book accommodations in advance for better rates",
            "Eat at local restaurants for authentic and affordable meals",
        ],
    )


def _template_activities(template: DayTemplate) -> dict[str, list[Activity]]:
    morning, afternoon, evening = template.morning, template.afternoon, template.evening
    return {
        "morning": [
            Activity(
                time="9:00 AM",
                activity=f"Morning exploration of {morning.name}",
                location=_location(morning),
                description=f"Start your day exploring the vibrant {morning.name} area",
                estimated_cost="₹200-500",
                duration="2-3 hours",
            )
        ],
        "afternoon": [
            Activity(
                time="2:00 PM",
                activity=f"Visit {afternoon.name}",
                location=_location(afternoon),
                description=f"Explore the must-see {afternoon.name} and its cultural significance",
                estimated_cost="₹300-800",
                duration="3-4 hours",
            )
        ],
        "evening": [
            Activity(
                time="7:00 PM",
                activity=f"Evening at {evening.name}",
                location=_location(evening),
                description=f"Experience the evening atmosphere and culture of {evening.name}",
                estimated_cost="₹400-1000",
                duration="2-3 hours",
            )
        ],
    }


def _template_meals(template: DayTemplate, city: str) -> list[Meal]:
    breakfast, lunch, dinner = template.breakfast, template.lunch, template.dinner
    return [
        Meal(
            meal="Breakfast",
            restaurant=breakfast.name,
            cuisine=breakfast.cuisine or "Local Cuisine",
            location=_location(breakfast),
            price="₹200-400",
            speciality=breakfast.speciality or "Traditional breakfast items",
            rating="4.0/5",
            ambiance="Casual and welcoming",
            cultural_note=f"Experience authentic {city} morning dining culture",
        ),
        Meal(
            meal="Lunch",
            restaurant=lunch.name,
            cuisine=lunch.cuisine or "Regional Specialties",
            location=_location(lunch),
            price="₹400-800",
            speciality=lunch.speciality or "Local lunch specialties",
            rating="4.2/5",
            ambiance="Family-friendly",
            cultural_note=f"Try authentic {city} regional dishes",
        ),
        Meal(
            meal="Dinner",
            restaurant=dinner.name,
            cuisine=dinner.cuisine or "Fine Dining",
            location=_location(dinner),
            price="₹800-1500",
            speciality=dinner.speciality or "Evening specialties and local delicacies",
            rating="4.3/5",
            ambiance="Elegant and sophisticated",
            cultural_note=f"Experience upscale {city} dining traditions",
        ),
    ]


def template_day(
    city: str,
    day: int,
    start_date: date,
    points_of_interest: list[str] | None = None,
) -> DayPlan:
    """Complete template day ``day`` (1-indexed) for ``city``."""
    template = day_template(city, day, points_of_interest)
    return DayPlan(
        day=day,
        date=(start_date + timedelta(days=day - 1)).isoformat(),
        summary=f"Day {day}: Discover the best of {city}",
        weather="Please check current weather conditions",
        dining=_template_meals(template, city),
        **_template_activities(template),
    )


def generate_fallback_itinerary(
    city: str,
    days: int,
    budget: str,
    *,
    start_date: date | None = None,
    points_of_interest: list[str] | None = None,
    include_cultural_tips: bool = True,
) -> ItineraryDocument:
    """Build a complete itinerary from the static city templates.

    Never fails. ``points_of_interest`` replaces the generic sight names for
    cities that have no template table.
    """
    start = start_date or date.today()
    return ItineraryDocument(
        days=[template_day(city, d, start, points_of_interest) for d in range(1, days + 1)],
        summary=build_summary(city, budget, include_cultural_tips),
    )


def filler_meal(meal: str, city: str) -> Meal:
    return Meal(
        meal=meal,
        restaurant=f"{city} {meal} Place",
        cuisine="Local Cuisine",
        location=Location(name=f"{city} {meal} Restaurant", address=city, coordinates=[0, 0]),
        price=_FILLER_MEAL_PRICES[meal],
        speciality=f"Local {meal.lower()} specialty",
        rating="4.0/5",
        ambiance="Friendly and welcoming",
        cultural_note=f"Experience local {meal.lower()} culture",
    )


def ensure_all_meals(meals: list[Meal], city: str) -> list[Meal]:
    """Exactly one Breakfast, Lunch and Dinner, in that order.

    The first meal carrying each label (case-insensitive) is kept. Meals with
    no label take the remaining slots in order. Labels still missing get a
    generic entry and any other meals are dropped.
    """
    by_label: dict[str, Meal] = {}
    unlabeled: list[Meal] = []
    for meal in meals:
        label = meal.meal.strip().capitalize()
        if not label:
            unlabeled.append(meal)
        elif label in MEAL_ORDER and label not in by_label:
            by_label[label] = meal if meal.meal == label else meal.model_copy(update={"meal": label})
    open_slots = [label for label in MEAL_ORDER if label not in by_label]
    for label, meal in zip(open_slots, unlabeled):
        by_label[label] = meal.model_copy(update={"meal": label})
    return [by_label.get(label) or filler_meal(label, city) for label in MEAL_ORDER]


def normalize_itinerary(
    document: ItineraryDocument,
    city: str,
    days: int,
    budget: str,
    *,
    start_date: date | None = None,
    include_cultural_tips: bool = True,
) -> ItineraryDocument:
    """Bring ``document`` to exactly ``days`` well-formed day entries.

    Extra days are dropped and missing ones come from the templates. Empty
    periods are filled with the template activity for that day.
    """
    start = start_date or date.today()
    normalized: list[DayPlan] = []
    for index in range(days):
        day_number = index + 1
        template = template_day(city, day_number, start)
        if index >= len(document.days):
            normalized.append(template)
            continue
        plan = document.days[index]
        update: dict[str, object] = {"day": day_number}
        if not plan.date:
            update["date"] = template.date
        if not plan.summary:
            update["summary"] = template.summary
        for period in PERIODS:
            if not getattr(plan, period):
                update[period] = getattr(template, period)
        update["dining"] = ensure_all_meals(plan.dining, city)
        normalized.append(plan.model_copy(update=update))

    summary = document.summary
    if not summary.total_cost:
        summary = summary.model_copy(update={"total_cost": _amount(parse_budget(budget))})
    if include_cultural_tips and not summary.cultural_tips:
        summary = summary.model_copy(
            update={"cultural_tips": build_summary(city, budget).cultural_tips}
        )
    return document.model_copy(update={"days": normalized, "summary": summary})
