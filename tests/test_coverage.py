"""Tests for mandatory-place coverage repair."""

import json

import pytest

from conftest import make_day, make_event
from travelgenie.domain.models import MandatoryPlace, PlanEvent, RawPlan, Severity
from travelgenie.engine.coverage import (
    estimate_cost,
    find_missing,
    names_match,
    prioritize,
    rating_tips,
    repair,
)
from travelgenie.engine.recovery import recover
from travelgenie.engine.tree import read_days


def _place(name, **kwargs):
    return MandatoryPlace(id=name.lower().replace(" ", "-"), name=name, **kwargs)


def _covered(repaired, place):
    return any(
        names_match(event.name, place.name)
        for day in repaired.days
        for event in day.events
    )


class TestNamesMatch:
    @pytest.mark.parametrize(
        "event_name, place_name",
        [
            ("Louvre Museum", "Louvre Museum"),
            ("Visit the LOUVRE MUSEUM", "louvre museum"),
            ("Louvre", "Louvre Museum"),
            ("Louvre Museum", "Louvre"),
        ],
    )
    def test_matches(self, event_name, place_name):
        assert names_match(event_name, place_name)

    def test_different_places_do_not_match(self):
        assert not names_match("Musee d'Orsay", "Louvre Museum")

    def test_blank_names_never_match(self):
        assert not names_match("", "Louvre")
        assert not names_match("Louvre", "  ")

    def test_shared_word_over_matches(self):
        """The loose rule treats a hotel named after a museum as the museum."""
        assert names_match("Louvre Hotel", "Louvre")


class TestRepair:
    def test_missing_place_becomes_first_event_of_day_one(self, paris_plan, louvre):
        """A plan mentioning no Louvre gets one, featured on day 1."""
        repaired = repair(RawPlan(paris_plan), [louvre])

        first = repaired.days[0].events[0]
        assert "Louvre Museum" in first.name
        assert repaired.injected == ("Louvre Museum",)

    def test_synthesized_event_fields(self, paris_plan, louvre):
        repaired = repair(RawPlan(paris_plan), [louvre])

        event = repaired.days[0].events[0]
        assert event.start_time == "12:00"
        assert event.end_time == "14:00"
        assert event.duration_minutes == 120
        assert event.category == "activity"
        assert event.address == louvre.address
        assert event.estimated_cost == "$30"
        assert "Paris" in event.description
        assert event.tips and "4.7" in event.tips[0]

    def test_missing_places_spread_across_days(self, paris_plan):
        places = [_place("Louvre Museum"), _place("Pantheon"), _place("Sacre-Coeur"), _place("Catacombs")]

        repaired = repair(RawPlan(paris_plan), places)

        assert repaired.days[0].events[0].name == "Louvre Museum"
        assert repaired.days[1].events[0].name == "Pantheon"
        # Overflow lands on the last day, newest injection first
        assert [e.name for e in repaired.days[2].events[:2]] == ["Catacombs", "Sacre-Coeur"]

    def test_present_places_are_not_injected(self, paris_plan):
        repaired = repair(RawPlan(paris_plan), [_place("Eiffel Tower")])

        assert repaired.injected == ()
        names = [e.name for e in repaired.days[2].events]
        assert names.count("Eiffel Tower") == 1

    def test_matching_events_move_to_front(self, paris_plan):
        repaired = repair(RawPlan(paris_plan), [_place("Jardin du Luxembourg")])

        names = [e.name for e in repaired.days[0].events]
        assert names == [
            "Jardin du Luxembourg",
            "Cafe de Flore",
            "Musee d'Orsay",
            "Le Procope",
            "Le Comptoir",
        ]

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"days": []},
            {"days": "not a list"},
            {"days": [make_day(1, [])]},
            {"days": [make_day(1, [make_event("Somewhere else")]), make_day(2, [])]},
            {"days": [{"day_number": 1, "events": [{"category": "dinner"}]}]},
        ],
    )
    def test_every_mandatory_place_is_covered(self, data):
        places = [_place("Louvre Museum"), _place("Eiffel Tower"), _place("Notre-Dame")]

        repaired = repair(RawPlan(data), places, destination="Paris")

        for place in places:
            assert _covered(repaired, place), place.name

    def test_plan_without_days_gets_one(self, louvre):
        repaired = repair(RawPlan({"destination": "Paris"}), [louvre])

        assert len(repaired.days) == 1
        assert repaired.days[0].day_number == 1
        assert repaired.days[0].events[0].name == "Louvre Museum"

    def test_injections_are_reported(self, paris_plan, louvre):
        repaired = repair(RawPlan(paris_plan), [louvre])

        warnings = [d for d in repaired.diagnostics if d.severity == Severity.WARNING]
        assert len(warnings) == 1
        assert warnings[0].stage == "coverage"
        assert warnings[0].details["place"] == "Louvre Museum"
        assert warnings[0].details["day_number"] == 1

    def test_earlier_diagnostics_are_kept(self, paris_plan, louvre):
        text = json.dumps(paris_plan)
        raw = recover(text[: text.index('"travel_tips"') - 2])

        repaired = repair(raw, [louvre])

        stages = [d.stage for d in repaired.diagnostics]
        assert stages.index("recovery") < stages.index("coverage")


class TestHelpers:
    def test_find_missing_keeps_input_order(self, paris_plan):
        days = read_days(paris_plan)
        places = [_place("Pantheon"), _place("Eiffel Tower"), _place("Louvre")]

        assert [p.name for p in find_missing(days, places)] == ["Pantheon", "Louvre"]

    def test_prioritize_is_stable(self):
        events = [PlanEvent("Cafe"), PlanEvent("Louvre"), PlanEvent("Park"), PlanEvent("Eiffel Tower")]
        places = [_place("Eiffel Tower"), _place("Louvre Museum")]

        ordered = prioritize(events, places)

        assert [e.name for e in ordered] == ["Louvre", "Eiffel Tower", "Cafe", "Park"]

    @pytest.mark.parametrize("level, expected", [(None, "$0"), (0, "$0"), (1, "$15"), (4, "$60")])
    def test_estimate_cost(self, level, expected):
        assert estimate_cost(level) == expected

    def test_rating_tips(self):
        assert rating_tips(None) == ()
        assert len(rating_tips(4.8)) == 2
        assert rating_tips(4.2) == ("Highly rated by visitors (4.2/5)",)
        assert rating_tips(3.1) == ("Rated 3.1/5 by visitors",)
