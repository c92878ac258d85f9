"""Shared fixtures: fake collaborators and sample plans."""

from __future__ import annotations

import copy
from typing import Dict, List, Optional

import pytest

from travelgenie.config import reset_config
from travelgenie.container import reset_container
from travelgenie.domain.errors import GeocodingError
from travelgenie.domain.models import GeoLocation, MandatoryPlace


class FakeGeocoder:
    """GeocoderPort fake answering from a fixed address book.

    Queries listed in ``failing`` raise GeocodingError; unknown queries
    return None. Every query is recorded in ``calls``.
    """

    def __init__(
        self,
        book: Optional[Dict[str, GeoLocation]] = None,
        failing: tuple[str, ...] = (),
    ) -> None:
        self.book = book or {}
        self.failing = failing
        self.calls: List[str] = []

    async def resolve(self, address: str) -> Optional[GeoLocation]:
        self.calls.append(address)
        if address in self.failing:
            raise GeocodingError("service unavailable", query=address)
        return self.book.get(address)


class FakeGenerator:
    """TextGeneratorPort fake returning a canned payload or raising."""

    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


def make_event(name, category="activity", start="10:00", end="11:00", coordinates=None, **extra):
    event = {
        "name": name,
        "description": f"About {name}",
        "address": f"{name}, Paris",
        "start_time": start,
        "end_time": end,
        "duration": 60,
        "category": category,
        "estimated_cost": "$10",
        "tips": [],
    }
    if coordinates is not None:
        event["coordinates"] = {"lat": coordinates[0], "lng": coordinates[1]}
    event.update(extra)
    return event


def make_day(number, events, date=""):
    return {
        "day_number": number,
        "date": date or f"2025-06-0{number}",
        "theme": f"Day {number}",
        "events": events,
        "daily_budget_breakdown": {
            "activities": "$40",
            "meals": "$60",
            "transportation": "$10",
            "total": "$110",
        },
    }


PARIS_PLAN = {
    "trip_title": "Three Days in Paris",
    "destination": "Paris",
    "duration_days": 3,
    "start_date": "2025-06-01",
    "end_date": "2025-06-03",
    "total_estimated_cost": "$330",
    "days": [
        make_day(1, [
            make_event("Cafe de Flore", "breakfast", "08:00", "09:00", (48.8541, 2.3326)),
            make_event("Musee d'Orsay", "activity", "09:30", "12:00", (48.86, 2.3266)),
            make_event("Le Procope", "lunch", "12:30", "13:30", (48.853, 2.3387)),
            make_event("Jardin du Luxembourg", "activity", "14:00", "16:00", (48.8462, 2.3372)),
            make_event("Le Comptoir", "dinner", "19:00", "20:30", (48.8522, 2.3389)),
        ]),
        make_day(2, [
            make_event("Du Pain et des Idees", "breakfast", "08:00", "09:00", (48.8716, 2.3631)),
            make_event("Sainte-Chapelle", "activity", "09:30", "11:00", (48.8554, 2.345)),
            make_event("Chez Janou", "lunch", "12:30", "13:30", (48.8572, 2.3661)),
            make_event("Dinner cruise", "dinner", "20:00", "22:00", (48.8584, 2.2945)),
        ]),
        make_day(3, [
            make_event("Carette", "breakfast", "08:00", "09:00", (48.8637, 2.2874)),
            make_event("Eiffel Tower", "activity", "09:30", "12:00", (48.8584, 2.2945)),
            make_event("Les Ombres", "lunch", "12:30", "14:00", (48.8577, 2.2966)),
        ]),
    ],
    "travel_tips": ["Buy a Navigo pass"],
    "packing_suggestions": ["Comfortable shoes"],
    "local_customs": ["Greet shopkeepers with bonjour"],
    "emergency_info": {
        "emergency_number": "112",
        "embassy_contact": "US Embassy Paris: +33 1 43 12 22 22",
        "important_phrases": ["Aidez-moi"],
    },
}


@pytest.fixture
def paris_plan():
    return copy.deepcopy(PARIS_PLAN)


@pytest.fixture
def louvre():
    return MandatoryPlace(
        id="louvre",
        name="Louvre Museum",
        address="Rue de Rivoli, 75001 Paris",
        rating=4.7,
        price_level=2,
    )


@pytest.fixture
def trip_payload():
    return {
        "destination": "Paris",
        "dateRange": {"from": "2025-06-01", "to": "2025-06-03"},
        "budget": "medium",
        "preferences": ["art", "food"],
        "mustSee": "Impressionist paintings",
        "mandatoryPlaces": [
            {"id": "louvre", "name": "Louvre Museum", "address": "Rue de Rivoli, 75001 Paris", "rating": 4.7, "priceLevel": 2},
            {"id": "eiffel", "name": "Eiffel Tower", "coordinates": {"lat": 48.8584, "lng": 2.2945}},
        ],
    }


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test starts from a clean configuration and container."""
    reset_config()
    reset_container()
    yield
    reset_config()
    reset_container()
