"""
models/records.py — Pydantic models for persisted rows.

  AggregateRecord          ↔ EconomicsData
  StructuredDocumentResult ↔ GeminiResponse
  GeoclientRecord          ↔ Address
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from siteintel_shared.constants import (
    DOCUMENT_SECTIONS,
    FRAGMENT_NAMES,
    STATE_AREA_CODES,
)
from siteintel_shared.models.address import Address, GeoIdentifiers


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class AggregateRecord(BaseModel):
    """
    The merged economic profile for one address.

    ``fragments`` maps fragment name → JSON payload. The row stores the
    address and its identifiers flattened into one ``address`` column and
    each fragment in its own column.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    address: Address
    geography: GeoIdentifiers
    fragments: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "AggregateRecord":
        location = dict(row.get("address") or {})
        # Rows written before stateAreaCode existed only carry the FIPS codes
        if not location.get("stateAreaCode") and location.get("stateFIPS"):
            location["stateAreaCode"] = STATE_AREA_CODES.get(location["stateFIPS"], "")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            created_at=row.get("createdAt"),
            address=Address.model_validate(location),
            geography=GeoIdentifiers.model_validate(location),
            fragments={
                name: row[name] for name in FRAGMENT_NAMES if row.get(name) is not None
            },
        )

    def to_insert_dict(self) -> dict[str, Any]:
        return {
            "address": {
                **self.geography.model_dump(by_alias=True),
                **self.address.model_dump(by_alias=True),
            },
            **self.fragments,
        }

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class StructuredDocumentResult(BaseModel):
    """
    Structured extraction of one real-estate document.

    Every section must be present as a key; any section may be null.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    supply_pipeline: Any
    land_sale_comparables: Any
    demographic_trends: Any
    proximity_insights: Any
    zoning_overlays: Any

    @classmethod
    def from_db_row(cls, row: dict[str, Any]) -> "StructuredDocumentResult":
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            created_at=row.get("createdAt"),
            **{section: row.get(_camel(section)) for section in DOCUMENT_SECTIONS},
        )

    def to_insert_dict(self) -> dict[str, Any]:
        return {_camel(section): getattr(self, section) for section in DOCUMENT_SECTIONS}

    def sections(self) -> dict[str, Any]:
        return {section: getattr(self, section) for section in DOCUMENT_SECTIONS}

    def is_complete(self) -> bool:
        """True when no section is null; an empty list or object still counts."""
        return all(getattr(self, section) is not None for section in DOCUMENT_SECTIONS)


class GeoclientRecord(BaseModel):
    """Raw NYC Geoclient response for an address extracted from a PDF."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    id: str | None = None
    created_at: datetime | None = Field(default=None, alias="createdAt")
    datasource: dict[str, Any]

    def to_insert_dict(self) -> dict[str, Any]:
        return {"datasource": self.datasource}
