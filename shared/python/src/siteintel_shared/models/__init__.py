"""
siteintel_shared.models — Pydantic models for payloads and stored rows.

These models are used by:
- packages/pipeline: typed stage outputs and records written to Supabase
- packages/api: request bodies and serialized responses

Stored-row models provide:
  .from_db_row(row: dict) -> Model
  .to_insert_dict() -> dict
"""

from siteintel_shared.models.address import Address, GeoIdentifiers
from siteintel_shared.models.fragments import (
    IndicatorFragment,
    MedianIncomeFragment,
    MedianIncomePoint,
    PopulationPoint,
    PopulationTrendFragment,
    SeriesCatalog,
    SeriesFragment,
    SeriesPoint,
    TaxIncentiveFragment,
    UtilityRateFragment,
    WageFragment,
)
from siteintel_shared.models.records import (
    AggregateRecord,
    GeoclientRecord,
    StructuredDocumentResult,
)
from siteintel_shared.models.routing import (
    Route,
    RouteRequest,
    TravelTimeMatrix,
    TravelTimeRequest,
)

__all__ = [
    "Address",
    "GeoIdentifiers",
    "IndicatorFragment",
    "WageFragment",
    "SeriesCatalog",
    "SeriesPoint",
    "SeriesFragment",
    "PopulationPoint",
    "PopulationTrendFragment",
    "MedianIncomePoint",
    "MedianIncomeFragment",
    "TaxIncentiveFragment",
    "UtilityRateFragment",
    "AggregateRecord",
    "StructuredDocumentResult",
    "GeoclientRecord",
    "TravelTimeRequest",
    "TravelTimeMatrix",
    "RouteRequest",
    "Route",
]
