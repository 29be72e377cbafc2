"""
sources/routing.py — travel-time and route lookups.

OpenRouteService matrix (coordinates are [lon, lat]):
  POST /v2/matrix/driving-car
  {"locations": [start, end1, end2, ...], "sources": [0],
   "destinations": [1, 2, ...], "metrics": ["duration", "distance"]}
  → {"durations": [[...]], "distances": [[...]]}

TomTom Routing (coordinates are lat,lon):
  GET /routing/1/calculateRoute/{lat},{lon}:{lat},{lon}/json
      ?key=...&computeBestOrder=true&routeType=fastest&travelMode=car&traffic=true
  → {"routes": [{"summary": {"lengthInMeters", "travelTimeInSeconds"},
                 "legs": [{"points": [{"latitude", "longitude"}, ...]}]}]}
"""

from __future__ import annotations

from typing import Any

import structlog

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.errors import NoDataFound, SchemaInvalid
from siteintel_shared.models import Route, TravelTimeMatrix
from siteintel_pipeline.sources.base import require_credential
from siteintel_pipeline.utils.http import request_json

log = structlog.get_logger(__name__)


class OpenRouteServiceClient:
    name = "OpenRouteService"
    profile = "driving-car"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    async def travel_times(
        self,
        start: tuple[float, float],
        ends: list[tuple[float, float]],
    ) -> TravelTimeMatrix:
        """Durations (s) and distances (m) from start to each end, in order."""
        api_key = require_credential(self.settings.ors_api_key, "ORS_API_KEY")
        locations = [list(start), *[list(end) for end in ends]]
        payload = await request_json(
            "POST",
            f"{self.settings.ors_base_url}/v2/matrix/{self.profile}",
            provider=self.name,
            json={
                "locations": locations,
                "sources": [0],
                "destinations": list(range(1, len(locations))),
                "metrics": ["duration", "distance"],
            },
            headers={"Authorization": api_key, "Content-Type": "application/json"},
        )
        try:
            matrix = TravelTimeMatrix(
                durations=payload["durations"][0],
                distances=payload["distances"][0],
            )
        except (KeyError, IndexError, TypeError) as exc:
            raise SchemaInvalid(
                f"{self.name} returned an unexpected matrix",
                details={"provider": self.name},
            ) from exc
        log.info("ors_matrix_complete", destinations=len(ends))
        return matrix


class TomTomClient:
    name = "TomTom"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    async def route(self, start: tuple[float, float], end: tuple[float, float]) -> Route:
        """Fastest car route with live traffic between two lat/lon points."""
        api_key = require_credential(self.settings.tomtom_api_key, "TOMTOM_API_KEY")
        waypoints = f"{start[0]},{start[1]}:{end[0]},{end[1]}"
        payload = await request_json(
            "GET",
            f"{self.settings.tomtom_base_url}/routing/1/calculateRoute/{waypoints}/json",
            provider=self.name,
            params={
                "key": api_key,
                "computeBestOrder": "true",
                "routeType": "fastest",
                "travelMode": "car",
                "traffic": "true",
            },
        )
        routes: list[dict[str, Any]] = (payload or {}).get("routes") or []
        if not routes:
            raise NoDataFound("No route found", details={"waypoints": waypoints})

        first = routes[0]
        try:
            summary = first["summary"]
            points = first["legs"][0]["points"]
            route = Route(
                distance=summary["lengthInMeters"],
                duration=summary["travelTimeInSeconds"],
                polyline=[(p["latitude"], p["longitude"]) for p in points],
            )
        except (KeyError, IndexError, TypeError) as exc:
            raise SchemaInvalid(
                f"{self.name} returned an unexpected route",
                details={"provider": self.name},
            ) from exc
        log.info("route_fetched", distance=route.distance, duration=route.duration)
        return route
