"""Command-line launcher for the itinerary engine.

Two subcommands:

    python start.py synthesize --raw plan.txt --places places.json [--request request.json]
    python start.py plan --request request.json

``synthesize`` runs recovery, repair, enrichment and normalization over
a saved generator payload. ``plan`` validates a request, calls the
configured generator and runs the same pipeline. Both print the
itinerary JSON, or the structured error payload with a non-zero exit.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict

from travelgenie.container import get_container
from travelgenie.domain.errors import TravelGenieError
from travelgenie.io.trip_request import parse_mandatory_places, parse_trip_request
from travelgenie.observability import configure_logging
from travelgenie.pipeline import synthesize_itinerary
from travelgenie.ports.geocoding import GeocoderPort
from travelgenie.services import ItineraryPlannerService


def _load_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _print(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def _synthesize(args: argparse.Namespace) -> Dict[str, Any]:
    container = get_container()
    raw_text = Path(args.raw).read_text(encoding="utf-8")
    places = parse_mandatory_places(_load_json(args.places))
    request = parse_trip_request(_load_json(args.request)) if args.request else None

    result = await synthesize_itinerary(
        raw_text,
        places,
        container.resolve(GeocoderPort),
        request=request,
        destination=args.destination,
        concurrency=container.config.geocoding.concurrency,
    )
    return result.to_dict()


async def _plan(args: argparse.Namespace) -> Dict[str, Any]:
    planner: ItineraryPlannerService = get_container().resolve(ItineraryPlannerService)
    result = await planner.plan(_load_json(args.request))
    return result.to_dict()


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Synthesize travel itineraries from generated plans.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    s = sub.add_parser("synthesize", help="Run the engine on a saved generator payload")
    s.add_argument("--raw", required=True, help="File holding the generator's raw text")
    s.add_argument("--places", required=True, help="JSON list of mandatory places")
    s.add_argument("--request", help="Optional JSON trip request (dates, preferences)")
    s.add_argument("--destination", help="Destination override for geocoding queries")

    pl = sub.add_parser("plan", help="Generate and synthesize an itinerary end to end")
    pl.add_argument("--request", required=True, help="JSON trip request")

    return p.parse_args()


def main() -> None:
    args = _parse_args()
    configure_logging()

    handler = _synthesize if args.command == "synthesize" else _plan
    try:
        payload = asyncio.run(handler(args))
    except TravelGenieError as e:
        _print(e.to_payload())
        sys.exit(1)

    _print(payload)


if __name__ == "__main__":
    main()
