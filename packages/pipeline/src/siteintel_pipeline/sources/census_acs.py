"""
sources/census_acs.py — Census ACS 1-year county time series.

Endpoint (one call per vintage year):
  GET /data/{year}/acs/acs1?get={variable}&for=county:{county}&in=state:{state}&key=...

Response shape (first row is the header):
  [["B01003_001E", "state", "county"], ["1234567", "17", "167"]]

The API answers 204 with an empty body when a county is below the ACS
1-year population threshold, which surfaces here as a parse failure.

These sources absorb per-year failures: a year that fails, has no row or
has a non-numeric value becomes ``null`` and the remaining years are still
fetched. The stage itself always returns one entry per configured year.

Usage:
    source = PopulationTrendSource()
    fragment = await source.run(geo)
    fragment.series[0]   # PopulationPoint(year=2014, population=210170)
"""

from __future__ import annotations

from typing import Any

from siteintel_shared.constants import (
    ACS_MEDIAN_HOUSEHOLD_INCOME,
    ACS_TOTAL_POPULATION,
    MEDIAN_INCOME_YEARS,
    POPULATION_YEARS,
)
from siteintel_shared.errors import SiteIntelError
from siteintel_shared.models import (
    GeoIdentifiers,
    IndicatorFragment,
    MedianIncomeFragment,
    MedianIncomePoint,
    PopulationPoint,
    PopulationTrendFragment,
)
from siteintel_pipeline.sources.base import BaseSource
from siteintel_pipeline.utils.http import request_json


class ACSTrendSource(BaseSource):
    """One ACS variable for one county across a fixed list of years."""

    name = "Census-ACS"
    credential_setting = "census_api_key"

    variable: str = ""
    years: tuple[int, ...] = ()

    def __init__(self, *args: Any, years: tuple[int, ...] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if years is not None:
            self.years = years

    def year_url(self, year: int) -> str:
        return f"{self.settings.census_data_url}/{year}/acs/acs1"

    async def fetch_year(self, year: int, geo: GeoIdentifiers) -> int | None:
        """
        Return the county value for one year, or None if it is unavailable.

        Never raises for provider-side problems.
        """
        try:
            rows = await request_json(
                "GET",
                self.year_url(year),
                provider=self.name,
                params={
                    "get": self.variable,
                    "for": f"county:{geo.county_fips}",
                    "in": f"state:{geo.state_fips}",
                    "key": self.credential,
                },
            )
        except SiteIntelError as exc:
            self._log.warning(
                "acs_year_failed",
                year=year,
                variable=self.variable,
                error_type=type(exc).__name__,
                error=exc.message,
            )
            return None

        if not isinstance(rows, list) or len(rows) < 2 or not rows[1]:
            self._log.warning("acs_year_no_data", year=year, county=geo.county_fips)
            return None

        try:
            value = int(rows[1][0])
        except (TypeError, ValueError):
            self._log.warning("acs_year_unparseable", year=year, raw=rows[1][0])
            return None
        # ACS uses large negative sentinels (e.g. -666666666) for suppressed cells
        return value if value >= 0 else None

    async def collect(self, geo: GeoIdentifiers) -> list[tuple[int, int | None]]:
        results: list[tuple[int, int | None]] = []
        for year in self.years:
            results.append((year, await self.fetch_year(year, geo)))
        missing = [year for year, value in results if value is None]
        if missing:
            self._log.info("acs_years_missing", variable=self.variable, years=missing)
        return results

    def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "endpoint": self.settings.census_data_url,
            "variable": self.variable,
            "years": list(self.years),
        }


class PopulationTrendSource(ACSTrendSource):
    fragment_name = "populationTrends"
    variable = ACS_TOTAL_POPULATION
    years = POPULATION_YEARS

    async def fetch(self, geo: GeoIdentifiers | None) -> IndicatorFragment:
        assert geo is not None
        results = await self.collect(geo)
        return PopulationTrendFragment(
            series=[PopulationPoint(year=year, population=value) for year, value in results]
        )


class MedianIncomeSource(ACSTrendSource):
    fragment_name = "medianIncomeTrends"
    variable = ACS_MEDIAN_HOUSEHOLD_INCOME
    years = MEDIAN_INCOME_YEARS

    async def fetch(self, geo: GeoIdentifiers | None) -> IndicatorFragment:
        assert geo is not None
        results = await self.collect(geo)
        return MedianIncomeFragment(
            series=[
                MedianIncomePoint(year=year, median_income=value)
                for year, value in results
            ]
        )
