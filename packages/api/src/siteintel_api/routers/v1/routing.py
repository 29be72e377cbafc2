"""Travel-time and route endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from siteintel_shared.models import RouteRequest, TravelTimeRequest
from siteintel_pipeline.sources.routing import OpenRouteServiceClient, TomTomClient

from siteintel_api.dependencies import get_ors_client, get_tomtom_client
from siteintel_api.responses import wrap_response

router = APIRouter(prefix="/routing", tags=["routing"])


@router.post("/matrix")
async def travel_time_matrix(
    body: TravelTimeRequest,
    client: OpenRouteServiceClient = Depends(get_ors_client),
):
    """Driving durations and distances from one start to each end."""
    matrix = await client.travel_times(body.start, body.ends)
    return wrap_response(matrix.model_dump(), source=client.name)


@router.post("/route")
async def fastest_route(
    body: RouteRequest,
    client: TomTomClient = Depends(get_tomtom_client),
):
    route = await client.route(body.start, body.end)
    return wrap_response(route.model_dump(), source=client.name)
