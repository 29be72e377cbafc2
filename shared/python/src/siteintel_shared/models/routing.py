"""
models/routing.py — Pydantic models for travel-time and route lookups.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


def parse_coordinate(value: Any) -> tuple[float, float]:
    """
    Accept "40.6793,-74.016" or [40.6793, -74.016] and return a float pair.

    Raises:
        ValueError: if the value is not exactly two numbers.
    """
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",")]
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError("coordinate must be a pair of numbers")
    try:
        first, second = float(value[0]), float(value[1])
    except (TypeError, ValueError) as exc:
        raise ValueError("coordinate must be a pair of numbers") from exc
    if first != first or second != second:  # NaN
        raise ValueError("coordinate must be a pair of numbers")
    return first, second


class TravelTimeRequest(BaseModel):
    """ORS matrix request: one start, many ends, [lon, lat] order."""

    start: tuple[float, float]
    ends: list[tuple[float, float]] = Field(min_length=1)

    @field_validator("start", mode="before")
    @classmethod
    def _parse_start(cls, v: Any) -> tuple[float, float]:
        return parse_coordinate(v)

    @field_validator("ends", mode="before")
    @classmethod
    def _parse_ends(cls, v: Any) -> list[tuple[float, float]]:
        if not isinstance(v, list):
            raise ValueError("ends must be a list of coordinates")
        return [parse_coordinate(item) for item in v]


class TravelTimeMatrix(BaseModel):
    durations: list[float | None]
    distances: list[float | None]


class RouteRequest(BaseModel):
    """TomTom route request, [lat, lon] order."""

    start: tuple[float, float]
    end: tuple[float, float]

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse(cls, v: Any) -> tuple[float, float]:
        return parse_coordinate(v)


class Route(BaseModel):
    distance: float
    duration: float
    polyline: list[tuple[float, float]]
