"""Economic enrichment endpoints."""

from __future__ import annotations

import io
from typing import Any

import polars as pl
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from siteintel_shared.errors import NoDataFound
from siteintel_shared.models import Address, AggregateRecord
from siteintel_pipeline.pipelines.enrichment import EnrichmentPipeline

from siteintel_api.dependencies import get_enrichment_pipeline
from siteintel_api.responses import wrap_response

router = APIRouter(prefix="/economics", tags=["economics"])

TREND_SCHEMA = {"year": pl.Int64, "population": pl.Int64, "medianIncome": pl.Int64}


@router.post("", status_code=201)
async def enrich_address(
    address: Address,
    pipeline: EnrichmentPipeline = Depends(get_enrichment_pipeline),
):
    """Run every indicator stage for an address and store the merged record."""
    record = await pipeline.run(address)
    return wrap_response(record.to_response(), source="siteintel")


@router.get("/latest")
async def get_latest(pipeline: EnrichmentPipeline = Depends(get_enrichment_pipeline)):
    """Most recently stored economic profile."""
    record = await _latest_or_404(pipeline)
    return wrap_response(record.to_response(), source="siteintel")


@router.get("/latest/trends")
async def get_latest_trends(
    pipeline: EnrichmentPipeline = Depends(get_enrichment_pipeline),
    format: str = Query("json", pattern="^(json|csv)$", description="json or csv"),
):
    """Population and median income by year from the latest profile."""
    record = await _latest_or_404(pipeline)
    rows = trend_rows(record)

    if format == "csv":
        return _csv_response(rows, f"trends_{record.geography.full_county_geoid}.csv")
    return wrap_response(rows, total_count=len(rows), source="Census-ACS")


async def _latest_or_404(pipeline: EnrichmentPipeline) -> AggregateRecord:
    record = await pipeline.latest()
    if record is None:
        raise NoDataFound("No data found")
    return record


def trend_rows(record: AggregateRecord) -> list[dict[str, Any]]:
    """Join populationTrends and medianIncomeTrends on year, ascending."""
    by_year: dict[int, dict[str, Any]] = {}

    def _row(year: int) -> dict[str, Any]:
        return by_year.setdefault(
            year, {"year": year, "population": None, "medianIncome": None}
        )

    for point in _trend_points(record.fragments.get("populationTrends")):
        _row(int(point["year"]))["population"] = point.get("population")

    for point in _trend_points(record.fragments.get("medianIncomeTrends")):
        _row(int(point["year"]))["medianIncome"] = point.get("medianIncome")

    return [by_year[year] for year in sorted(by_year)]


def _trend_points(fragment: Any) -> list[dict[str, Any]]:
    # Legacy rows hold the bare array instead of {"series": [...]}
    if isinstance(fragment, dict):
        fragment = fragment.get("series")
    points = fragment if isinstance(fragment, list) else []
    return [point for point in points if isinstance(point, dict) and point.get("year") is not None]


def _csv_response(rows: list[dict[str, Any]], filename: str) -> StreamingResponse:
    """Render rows as CSV with a fixed header."""
    df = pl.DataFrame(rows, schema=TREND_SCHEMA)
    buf = io.BytesIO()
    df.write_csv(buf)
    content = buf.getvalue().decode()

    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
