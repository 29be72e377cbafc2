"""
models/address.py — Pydantic models for addresses and resolved geography.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class Address(BaseModel):
    """
    A US street address as submitted by a caller or extracted from a PDF.

    Fields default to "" so that a partially filled payload reaches the
    resolver, which reports every missing field at once.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )

    street_number: str = Field(
        default="",
        validation_alias=AliasChoices("streetNumber", "houseNumber", "street_number"),
        serialization_alias="streetNumber",
    )
    street_name: str = Field(
        default="",
        validation_alias=AliasChoices("streetName", "street_name"),
        serialization_alias="streetName",
    )
    city: str = ""
    state: str = ""
    zip_code: str = Field(
        default="",
        validation_alias=AliasChoices("zipCode", "zip", "zip_code"),
        serialization_alias="zipCode",
    )

    def missing_fields(self) -> list[str]:
        """Return the serialized names of every empty field."""
        dumped = self.model_dump(by_alias=True)
        return [name for name, value in dumped.items() if not value]

    def oneline(self) -> str:
        """Format as '123 Main St, Springfield, IL 62701'."""
        return (
            f"{self.street_number} {self.street_name}, "
            f"{self.city}, {self.state} {self.zip_code}"
        ).strip()


class GeoIdentifiers(BaseModel):
    """
    Stable geographic identifiers for a resolved address.

    Never partially populated: validation fails unless all four are set.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    state_fips: str = Field(alias="stateFIPS")
    county_fips: str = Field(alias="countyFIPS")
    full_county_geoid: str = Field(alias="fullCountyGEOID")
    state_area_code: str = Field(alias="stateAreaCode")

    @model_validator(mode="after")
    def _all_populated(self) -> "GeoIdentifiers":
        missing = [
            name
            for name, value in self.model_dump(by_alias=True).items()
            if not value
        ]
        if missing:
            raise ValueError(f"geographic identifiers missing: {', '.join(missing)}")
        return self
