"""Tests for lenient coercion of itinerary documents."""

import pytest
from pydantic import ValidationError

from backend.app.models.itinerary import (
    Activity,
    DayPlan,
    ItineraryDocument,
    Location,
    Meal,
    TripSummary,
)


class TestLocation:
    def test_string_location_becomes_name(self) -> None:
        activity = Activity.model_validate({"activity": "Walk", "location": "Marine Drive"})
        assert activity.location == Location(name="Marine Drive")

    @pytest.mark.parametrize("value", ["", "   ", 7, ["a", "b"]])
    def test_unusable_location_is_dropped(self, value: object) -> None:
        assert Meal.model_validate({"location": value}).location is None

    def test_missing_name_is_empty(self) -> None:
        assert Location.model_validate({"address": "Colaba"}).name == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ([18.92, 72.83], [18.92, 72.83]),
            (["18.92", "72.83"], [18.92, 72.83]),
            ({"lat": 18.92, "lng": 72.83}, [18.92, 72.83]),
            ({"lat": 18.92, "lon": 72.83}, [18.92, 72.83]),
            ({"lat": 18.92}, []),
            ("18.92, 72.83", []),
            (["north", "east"], []),
        ],
    )
    def test_coordinates(self, value: object, expected: list[float]) -> None:
        assert Location.model_validate({"name": "x", "coordinates": value}).coordinates == expected


class TestDayPlan:
    @pytest.mark.parametrize(
        ("value", "expected"), [(2, 2), ("Day 3", 3), ("4", 4), ("first", 0), (None, 0)]
    )
    def test_day_number(self, value: object, expected: int) -> None:
        assert DayPlan.model_validate({"day": value}).day == expected

    def test_missing_day_number(self) -> None:
        assert DayPlan.model_validate({"summary": "Beaches"}).day == 0

    def test_string_entries_are_wrapped(self) -> None:
        plan = DayPlan.model_validate(
            {"morning": ["Sunrise at Juhu"], "dining": ["Cafe Madras"]}
        )
        assert plan.morning[0].activity == "Sunrise at Juhu"
        assert plan.dining[0].restaurant == "Cafe Madras"
        assert plan.dining[0].meal == ""

    def test_single_object_becomes_list(self) -> None:
        plan = DayPlan.model_validate({"evening": {"activity": "Sunset"}})
        assert [a.activity for a in plan.evening] == ["Sunset"]

    def test_unreadable_entries_are_dropped(self) -> None:
        plan = DayPlan.model_validate(
            {"afternoon": [{"activity": "Museum"}, 12, None, True], "dining": None}
        )
        assert [a.activity for a in plan.afternoon] == ["Museum"]
        assert plan.dining == []

    def test_text_fields_are_flattened(self) -> None:
        plan = DayPlan.model_validate(
            {"weather": {"sky": "Sunny", "temp": 31}, "summary": ["Forts", "Markets"], "date": None}
        )
        assert plan.weather == "Sunny, 31"
        assert plan.summary == "Forts, Markets"
        assert plan.date == ""

    def test_unknown_keys_are_kept(self) -> None:
        plan = DayPlan.model_validate({"day": 1, "theme": "Heritage"})
        assert plan.model_dump(by_alias=True)["theme"] == "Heritage"


class TestTripSummary:
    def test_scalar_lists_are_wrapped(self) -> None:
        summary = TripSummary.model_validate({"highlights": "Street food", "tips": None})
        assert summary.highlights == ["Street food"]
        assert summary.tips == []

    def test_non_object_breakdown_is_dropped(self) -> None:
        assert TripSummary.model_validate({"costBreakdown": "about half"}).cost_breakdown is None

    def test_numeric_total_cost(self) -> None:
        assert TripSummary.model_validate({"totalCost": 48000}).total_cost == "48000"


class TestDocument:
    def test_unusable_days_are_dropped(self) -> None:
        document = ItineraryDocument.model_validate(
            {"days": ["Day 1: beaches", {"day": "Day 2"}], "summary": "A lovely trip"}
        )
        assert [d.day for d in document.days] == [2]
        assert document.summary == TripSummary()

    @pytest.mark.parametrize("days", [[], ["only text"], None])
    def test_no_usable_day_is_invalid(self, days: object) -> None:
        with pytest.raises(ValidationError):
            ItineraryDocument.model_validate({"days": days})

    def test_location_names_skip_blank_names(self) -> None:
        document = ItineraryDocument.model_validate(
            {
                "days": [
                    {
                        "morning": [{"location": {"address": "Colaba"}}, {"location": "Gateway"}],
                        "dining": [{"location": "Leopold Cafe"}],
                    }
                ]
            }
        )
        assert document.location_names() == ["Gateway", "Leopold Cafe"]
