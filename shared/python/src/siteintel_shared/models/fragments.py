"""
models/fragments.py — one payload model per enrichment stage.

Each fragment is produced by exactly one source and is self-contained.
Serialized names (aliases) are the JSON keys stored in EconomicsData.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IndicatorFragment(BaseModel):
    """Base for all stage payloads."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class WageFragment(IndicatorFragment):
    """Hourly mean wage for one occupation (BLS OEWS)."""

    hourly_wage: float = Field(alias="hourlyWage")
    series_id: str = Field(alias="seriesId")
    year: str
    occupation_code: str = Field(alias="occupationCode")


class SeriesCatalog(BaseModel):
    """BLS series catalog metadata (present when catalog=true was requested)."""

    series_title: str | None = None
    series_id: str | None = None
    area: str | None = None
    area_type: str | None = None
    survey_name: str | None = None
    measure_data_type: str | None = None


class SeriesPoint(BaseModel):
    """One BLS observation."""

    model_config = ConfigDict(populate_by_name=True)

    year: str
    period: str
    period_name: str | None = Field(default=None, alias="periodName")
    latest: bool = False
    value: float | None = None
    footnotes: list[dict[str, Any]] = Field(default_factory=list)
    calculations: dict[str, Any] = Field(default_factory=dict)

    @field_validator("value", mode="before")
    @classmethod
    def _suppressed_to_none(cls, v: Any) -> Any:
        # BLS marks unavailable observations with "-" or "(NA)"
        if isinstance(v, str):
            v = v.strip().replace(",", "")
            try:
                return float(v)
            except ValueError:
                return None
        return v


class SeriesFragment(IndicatorFragment):
    """A full BLS time series with its catalog."""

    catalog: SeriesCatalog
    series: list[SeriesPoint]


class PopulationPoint(BaseModel):
    year: int
    population: int | None = None


class PopulationTrendFragment(IndicatorFragment):
    series: list[PopulationPoint]


class MedianIncomePoint(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    year: int
    median_income: int | None = Field(default=None, alias="medianIncome")


class MedianIncomeFragment(IndicatorFragment):
    series: list[MedianIncomePoint]


class TaxIncentiveFragment(IndicatorFragment):
    """
    Federal business tax credits as returned by the model.

    ``rawText`` holds the model output verbatim when it was not valid JSON.
    """

    programs: list[dict[str, Any]] = Field(default_factory=list)
    raw_text: str | None = Field(default=None, alias="rawText")


class UtilityRateFragment(IndicatorFragment):
    """Contents of the static utility-rate reference dataset."""

    source: str
    rates: Any
