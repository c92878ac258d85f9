"""Tests for trip request validation."""

from datetime import date

import pytest

from travelgenie.domain.errors import ValidationError
from travelgenie.domain.models import BudgetTier, GeoLocation, Preference
from travelgenie.io.trip_request import parse_date, parse_mandatory_places, parse_trip_request


class TestParseTripRequest:
    def test_valid_payload(self, trip_payload):
        request = parse_trip_request(trip_payload)

        assert request.destination == "Paris"
        assert request.start_date == date(2025, 6, 1)
        assert request.end_date == date(2025, 6, 3)
        assert request.duration_days == 3
        assert request.budget == BudgetTier.MEDIUM
        assert request.preferences == (Preference.ART, Preference.FOOD)
        assert request.must_see == "Impressionist paintings"

        louvre, eiffel = request.mandatory_places
        assert louvre.id == "louvre"
        assert louvre.price_level == 2
        assert louvre.rating == 4.7
        assert eiffel.coordinates == GeoLocation(48.8584, 2.2945)

    def test_snake_case_payload(self):
        request = parse_trip_request({
            "destination": "Rome",
            "start_date": "2025-09-10",
            "end_date": "2025-09-10",
            "budget": "Luxury",
            "preferences": ["history", "History"],
            "mandatory_places": ["Colosseum"],
        })

        assert request.duration_days == 1
        assert request.budget == BudgetTier.LUXURY
        assert request.preferences == (Preference.HISTORY,)
        assert request.mandatory_places[0].name == "Colosseum"
        assert request.mandatory_places[0].id == "place-1"

    @pytest.mark.parametrize(
        "field, value, expected_field",
        [
            ("destination", "  ", "destination"),
            ("dateRange", {"from": "2025-06-01"}, "date_range"),
            ("dateRange", {"from": "2025-06-05", "to": "2025-06-01"}, "date_range"),
            ("dateRange", {"from": "zzzz", "to": "2025-06-01"}, "date_range"),
            ("budget", "cheap", "budget"),
            ("budget", None, "budget"),
            ("preferences", [], "preferences"),
            ("preferences", ["art", "sleeping"], "preferences"),
            ("mandatoryPlaces", [], "mandatory_places"),
            ("mandatoryPlaces", [{"address": "somewhere"}], "mandatory_places"),
        ],
    )
    def test_invalid_field(self, trip_payload, field, value, expected_field):
        trip_payload[field] = value

        with pytest.raises(ValidationError) as exc_info:
            parse_trip_request(trip_payload)

        assert exc_info.value.field_name == expected_field
        assert exc_info.value.status_code == 400

    def test_body_must_be_an_object(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_trip_request(["Paris"])
        assert exc_info.value.field_name == "body"


def test_parse_mandatory_places_rejects_non_objects():
    with pytest.raises(ValidationError):
        parse_mandatory_places([42])


def test_parse_date_accepts_date_objects():
    assert parse_date(date(2025, 1, 2)) == date(2025, 1, 2)
    assert parse_date("") is None
    assert parse_date(None) is None
