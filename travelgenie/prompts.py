"""Prompt construction for the itinerary generator.

The schema asked for here is the one the engine's readers expect
first; the readers still tolerate the drift the model is known for.
"""

from __future__ import annotations

from .domain.models import BudgetTier, Preference, TripRequest

BUDGET_DESCRIPTIONS = {
    BudgetTier.BUDGET: "budget-friendly (under $100/day)",
    BudgetTier.MEDIUM: "moderate budget ($100-250/day)",
    BudgetTier.LUXURY: "luxury budget ($250+/day)",
}

PREFERENCE_LABELS = {
    Preference.ART: "art & culture",
    Preference.FOOD: "food & dining",
    Preference.ADVENTURE: "adventure activities",
    Preference.HISTORY: "historical sites",
    Preference.NATURE: "nature & outdoor activities",
    Preference.NIGHTLIFE: "nightlife & entertainment",
    Preference.SHOPPING: "shopping",
    Preference.RELAXATION: "relaxation & wellness",
}

_SCHEMA = """{
  "trip_title": "string",
  "destination": "%(destination)s",
  "duration_days": %(days)d,
  "start_date": "%(start)s",
  "end_date": "%(end)s",
  "total_estimated_cost": "string",
  "days": [
    {
      "day_number": number,
      "date": "YYYY-MM-DD",
      "theme": "string",
      "events": [
        {
          "name": "string",
          "description": "string",
          "address": "string",
          "coordinates": {"lat": number, "lng": number},
          "start_time": "HH:MM",
          "end_time": "HH:MM",
          "duration": minutes,
          "category": "breakfast | lunch | dinner | activity | sightseeing | ...",
          "estimated_cost": "string",
          "tips": ["string"]
        }
      ],
      "daily_budget_breakdown": {
        "activities": "string",
        "meals": "string",
        "transportation": "string",
        "total": "string"
      }
    }
  ],
  "travel_tips": ["string"],
  "packing_suggestions": ["string"],
  "local_customs": ["string"],
  "emergency_info": {
    "emergency_number": "string",
    "embassy_contact": "string",
    "important_phrases": ["string"]
  }
}"""


def describe_budget(budget: BudgetTier) -> str:
    return BUDGET_DESCRIPTIONS.get(budget, "moderate budget")


def describe_preferences(preferences: tuple[Preference, ...]) -> str:
    return ", ".join(PREFERENCE_LABELS.get(p, p.value) for p in preferences)


def build_itinerary_prompt(request: TripRequest) -> str:
    """Render the generation prompt for ``request``."""
    days = request.duration_days
    places = "\n".join(
        f"- {place.name}" + (f" ({place.address})" if place.address else "")
        for place in request.mandatory_places
    )
    must_see = f"\n\nMUST-SEE NOTES: {request.must_see}" if request.must_see else ""
    schema = _SCHEMA % {
        "destination": request.destination,
        "days": days,
        "start": request.start_date.isoformat(),
        "end": request.end_date.isoformat(),
    }

    return f"""You are TravelGenie, an expert travel planner creating personalized, optimized itineraries.

TRIP DETAILS:
- Destination: {request.destination}
- Duration: {days} days ({request.start_date.isoformat()} to {request.end_date.isoformat()})
- Budget: {describe_budget(request.budget)}
- Interests: {describe_preferences(request.preferences)}{must_see}

MANDATORY PLACES (each must appear as an event, using this exact name):
{places}

TASK:
Create a detailed {days}-day itinerary that optimizes for:
1. Minimal travel time between events
2. Logical geographic clustering within each day
3. Appropriate timing for each event
4. Budget-conscious recommendations
5. Personalized experiences based on interests

Every day has one breakfast, one lunch and one dinner event, using those
words as the category. Keep descriptions short.

OUTPUT FORMAT:
Return ONLY valid JSON (no markdown, no backticks):

{schema}

Generate the complete itinerary now:"""
