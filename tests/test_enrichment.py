"""Tests for geospatial enrichment."""

import asyncio

import pytest

from conftest import FakeGeocoder
from travelgenie.domain.errors import ConfigurationError
from travelgenie.domain.models import (
    GeoLocation,
    PlanDay,
    PlanEvent,
    RepairedPlan,
    Severity,
    TripMeta,
)
from travelgenie.engine.enrichment import chronological, enrich, enrich_day
from travelgenie.engine.geo import haversine_km, travel_time_minutes

LOUVRE = GeoLocation(48.8606, 2.3376)
ORSAY = GeoLocation(48.86, 2.3266)
EIFFEL = GeoLocation(48.8584, 2.2945)


def _plan(*days, destination="Paris"):
    return RepairedPlan(meta=TripMeta(destination=destination), days=tuple(days))


def _day(*events, number=1):
    return PlanDay(day_number=number, events=tuple(events))


class TestEnrich:
    def test_known_coordinates_skip_the_geocoder(self):
        geocoder = FakeGeocoder()
        plan = _plan(_day(
            PlanEvent("Louvre", coordinates=LOUVRE, start_time="09:00"),
            PlanEvent("Orsay", coordinates=ORSAY, start_time="13:00"),
        ))

        enriched = asyncio.run(enrich(plan, geocoder))

        assert geocoder.calls == []
        events = enriched.days[0].events
        assert events[0].coordinates == LOUVRE
        assert events[0].travel_distance_to_next_km == haversine_km(
            LOUVRE.latitude, LOUVRE.longitude, ORSAY.latitude, ORSAY.longitude
        )
        assert events[0].travel_time_to_next_minutes == travel_time_minutes(
            events[0].travel_distance_to_next_km
        )

    def test_last_event_of_day_has_no_metrics(self):
        plan = _plan(_day(
            PlanEvent("Louvre", coordinates=LOUVRE, start_time="09:00"),
            PlanEvent("Eiffel Tower", coordinates=EIFFEL, start_time="15:00"),
        ))

        last = asyncio.run(enrich(plan, FakeGeocoder())).days[0].events[-1]

        assert last.travel_time_to_next_minutes is None
        assert last.travel_distance_to_next_km is None

    def test_missing_coordinates_are_geocoded_by_address(self):
        geocoder = FakeGeocoder({"Rue de Rivoli, Paris": LOUVRE})
        plan = _plan(_day(PlanEvent("Louvre", address="Rue de Rivoli, Paris")))

        event = asyncio.run(enrich(plan, geocoder)).days[0].events[0]

        assert geocoder.calls == ["Rue de Rivoli, Paris"]
        assert event.coordinates == LOUVRE
        assert not event.geocode_failed

    def test_zero_coordinates_count_as_missing(self):
        geocoder = FakeGeocoder({"Louvre, Paris": LOUVRE})
        plan = _plan(_day(PlanEvent("Louvre", coordinates=GeoLocation.unknown())))

        event = asyncio.run(enrich(plan, geocoder)).days[0].events[0]

        assert geocoder.calls == ["Louvre, Paris"]
        assert event.coordinates == LOUVRE

    def test_geocoding_failure_degrades_to_zero(self):
        geocoder = FakeGeocoder({"Orsay, Paris": ORSAY}, failing=("Louvre, Paris",))
        plan = _plan(_day(
            PlanEvent("Louvre", start_time="09:00"),
            PlanEvent("Orsay", start_time="13:00"),
            PlanEvent("Nowhere", start_time="17:00"),
        ))

        enriched = asyncio.run(enrich(plan, geocoder))

        louvre, orsay, nowhere = enriched.days[0].events
        assert louvre.coordinates.is_zero and louvre.geocode_failed
        assert orsay.coordinates == ORSAY
        assert nowhere.coordinates.is_zero and nowhere.geocode_failed
        # Degraded events keep their metrics; geocode_failed marks them
        assert louvre.travel_distance_to_next_km == haversine_km(0.0, 0.0, ORSAY.latitude, ORSAY.longitude)
        assert orsay.travel_time_to_next_minutes is not None

        warnings = [d for d in enriched.diagnostics if d.severity == Severity.WARNING]
        assert {d.details["event"] for d in warnings} == {"Louvre", "Nowhere"}

    def test_events_are_put_in_time_order(self):
        plan = _plan(_day(
            PlanEvent("Dinner", start_time="19:00", coordinates=EIFFEL),
            PlanEvent("Breakfast", start_time="8:00 AM", coordinates=LOUVRE),
            PlanEvent("Lunch", start_time="12:30", coordinates=ORSAY),
        ))

        events = asyncio.run(enrich(plan, FakeGeocoder())).days[0].events

        assert [e.event.name for e in events] == ["Breakfast", "Lunch", "Dinner"]
        assert events[0].travel_distance_to_next_km == haversine_km(
            LOUVRE.latitude, LOUVRE.longitude, ORSAY.latitude, ORSAY.longitude
        )

    def test_bounded_concurrency_keeps_order(self):
        book = {f"Stop {i}, Paris": GeoLocation(48.85 + i / 1000, 2.35) for i in range(6)}
        geocoder = FakeGeocoder(book)
        events = [PlanEvent(f"Stop {i}", start_time=f"{9 + i}:00") for i in range(6)]

        sequential = asyncio.run(enrich(_plan(_day(*events)), FakeGeocoder(book)))
        fanned_out = asyncio.run(enrich(_plan(_day(*events)), geocoder, concurrency=3))

        assert fanned_out.days == sequential.days
        assert len(geocoder.calls) == 6

    def test_days_are_processed_in_order(self):
        geocoder = FakeGeocoder({"A, Paris": LOUVRE, "B, Paris": ORSAY})
        plan = _plan(_day(PlanEvent("A"), number=1), _day(PlanEvent("B"), number=2))

        enriched = asyncio.run(enrich(plan, geocoder))

        assert geocoder.calls == ["A, Paris", "B, Paris"]
        assert [d.day_number for d in enriched.days] == [1, 2]

    def test_unresolved_address_still_gets_metrics(self):
        """An event that could not be geocoded keeps metrics to its successor."""
        target = GeoLocation(48.8, 2.3)
        plan = _plan(_day(
            PlanEvent("A", address="a", start_time="09:00"),
            PlanEvent("B", coordinates=target, start_time="10:00"),
        ))

        first = asyncio.run(enrich(plan, FakeGeocoder())).days[0].events[0]

        assert first.geocode_failed
        assert first.travel_distance_to_next_km == haversine_km(0.0, 0.0, 48.8, 2.3)
        assert first.travel_time_to_next_minutes == travel_time_minutes(first.travel_distance_to_next_km)

    def test_fatal_error_cancels_pending_lookups(self):
        cancelled = []

        class MisconfiguredGeocoder:
            async def resolve(self, address):
                if address == "bad":
                    raise ConfigurationError("Geocoding credentials rejected")
                try:
                    await asyncio.sleep(10)
                except asyncio.CancelledError:
                    cancelled.append(address)
                    raise

        plan = _plan(_day(
            PlanEvent("Bad", address="bad", start_time="09:00"),
            PlanEvent("Slow 1", address="slow 1", start_time="10:00"),
            PlanEvent("Slow 2", address="slow 2", start_time="11:00"),
        ))

        async def run():
            with pytest.raises(ConfigurationError):
                await enrich(plan, MisconfiguredGeocoder(), concurrency=3)
            for _ in range(3):
                await asyncio.sleep(0)

        asyncio.run(run())

        assert sorted(cancelled) == ["slow 1", "slow 2"]

def test_enrich_day_without_destination_uses_name():
    geocoder = FakeGeocoder({"Louvre": LOUVRE})

    day = asyncio.run(enrich_day(_day(PlanEvent("Louvre")), geocoder))

    assert day.events[0].coordinates == LOUVRE


def test_chronological_puts_untimed_events_last():
    events = [PlanEvent("Untimed"), PlanEvent("Late", start_time="18:00"), PlanEvent("Early", start_time="07:30")]
    assert [e.name for e in chronological(events)] == ["Early", "Late", "Untimed"]
