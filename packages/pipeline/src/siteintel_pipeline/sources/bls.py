"""
sources/bls.py — Bureau of Labor Statistics Public Data API v2 sources.

Endpoint:
  POST /publicAPI/v2/timeseries/data
  {
    "seriesid": ["LAUCN171670000000003"],
    "startyear": "2020", "endyear": "2025",
    "registrationKey": "...",
    "calculations": true, "catalog": true
  }

Response shape:
  {
    "status": "REQUEST_SUCCEEDED",
    "message": [],
    "Results": {
      "series": [
        {
          "seriesID": "LAUCN171670000000003",
          "catalog": {"series_title": "...", "area": "...", ...},
          "data": [
            {"year": "2024", "period": "M12", "periodName": "December",
             "latest": "true", "value": "4.1", "footnotes": [{}],
             "calculations": {"net_changes": {...}, "pct_changes": {...}}},
            ...
          ]
        }
      ]
    }
  }

BLS reports request-level problems (bad key, quota) with HTTP 200 and a
status other than REQUEST_SUCCEEDED; those are upstream failures. An empty
``data`` list means the series exists but has nothing for the range.

Series we pull:
  OEUS{area}000000537062 03  — hourly mean wage, laborers/material movers
  LAUCN{state}{county}...5   — employment (county)
  LAUCN{state}{county}...4   — unemployment count (county)
  LAUCN{state}{county}...3   — unemployment rate (county)
  CUSR0000SA0                — CPI-U all items (consumer spending proxy)
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from siteintel_shared.constants import (
    CPI_ALL_ITEMS_SERIES,
    LAUS_COUNTY_SERIES,
    LAUS_EMPLOYMENT,
    LAUS_UNEMPLOYMENT,
    LAUS_UNEMPLOYMENT_RATE,
    OES_WAGE_SERIES,
    WAREHOUSE_OCCUPATION_SOC,
)
from siteintel_shared.errors import NoDataFound, SchemaInvalid, UpstreamFailure
from siteintel_shared.models import (
    GeoIdentifiers,
    SeriesCatalog,
    SeriesFragment,
    SeriesPoint,
    WageFragment,
)
from siteintel_pipeline.sources.base import BaseSource
from siteintel_pipeline.utils.http import request_json

REQUEST_SUCCEEDED = "REQUEST_SUCCEEDED"


class BLSSource(BaseSource):
    """Shared request/validation logic for every BLS-backed stage."""

    name = "BLS"
    credential_setting = "bls_api_key"

    start_year: int = 2020
    end_year: int = 2025
    calculations: bool = False
    catalog: bool = False

    def series_id(self, geo: GeoIdentifiers | None) -> str:
        raise NotImplementedError

    async def _fetch_series(self, series_id: str) -> dict[str, Any]:
        """
        Fetch one series and return its ``Results.series[0]`` object.

        Raises:
            UpstreamFailure: transport error, non-2xx, or status != REQUEST_SUCCEEDED.
            NoDataFound:     the series came back with zero data points.
            SchemaInvalid:   ``Results.series`` is not a list of objects.
        """
        body: dict[str, Any] = {
            "seriesid": [series_id],
            "startyear": str(self.start_year),
            "endyear": str(self.end_year),
            "registrationKey": self.credential,
        }
        if self.calculations:
            body["calculations"] = True
        if self.catalog:
            body["catalog"] = True

        self._log.info(
            "bls_fetch",
            series_id=series_id,
            start_year=self.start_year,
            end_year=self.end_year,
        )
        payload = await request_json(
            "POST", self.settings.bls_api_url, provider=self.name, json=body
        )

        if not isinstance(payload, dict):
            payload = {}
        status = payload.get("status")
        if status != REQUEST_SUCCEEDED:
            raise UpstreamFailure(
                self.name,
                body={"status": status, "message": payload.get("message")},
                message=f"{self.name} request not processed",
            )

        results = payload.get("Results")
        series = results.get("series") if isinstance(results, dict) else None
        if series and (not isinstance(series, list) or not isinstance(series[0], dict)):
            raise SchemaInvalid(
                f"Malformed {self.name} series", details={"series_id": series_id}
            )
        if not series or not series[0].get("data"):
            raise NoDataFound(
                f"No {self.fragment_name} data found",
                details={"series_id": series_id, "messages": payload.get("message") or []},
            )
        return series[0]

    def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "endpoint": self.settings.bls_api_url,
            "fragment": self.fragment_name,
            "years": [self.start_year, self.end_year],
        }

    def _parse_points(self, series_id: str, entries: Any) -> list[SeriesPoint]:
        """
        Raises:
            SchemaInvalid: ``data`` is not a list of well-formed observations.
        """
        if not isinstance(entries, list):
            raise SchemaInvalid(
                f"Malformed {self.name} series data", details={"series_id": series_id}
            )
        try:
            return [SeriesPoint.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise SchemaInvalid(
                f"Malformed {self.name} observation",
                details={
                    "series_id": series_id,
                    "errors": exc.errors(
                        include_url=False, include_context=False, include_input=False
                    ),
                },
            ) from exc


class WageSource(BLSSource):
    """Hourly mean wage for warehouse workers in the address's state (OEWS)."""

    name = "BLS-OEWS"
    fragment_name = "warehouseWagesPerHour"
    start_year = 2024
    end_year = 2024

    def __init__(self, *args: Any, occupation: str = WAREHOUSE_OCCUPATION_SOC, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.occupation = occupation

    def series_id(self, geo: GeoIdentifiers | None) -> str:
        assert geo is not None
        return OES_WAGE_SERIES.format(
            area_code=geo.state_area_code, occupation=self.occupation
        )

    async def fetch(self, geo: GeoIdentifiers | None) -> WageFragment:
        series_id = self.series_id(geo)
        series = await self._fetch_series(series_id)
        point = self._parse_points(series_id, series["data"])[0]
        if point.value is None:
            raise NoDataFound(
                "No warehouse wage data found",
                details={"series_id": series_id},
            )
        return WageFragment(
            hourly_wage=point.value,
            series_id=series_id,
            year=point.year,
            occupation_code=self.occupation,
        )


class SeriesSource(BLSSource):
    """A BLS source whose fragment is the whole series plus its catalog."""

    default_title: str = ""
    catalog = True

    async def fetch(self, geo: GeoIdentifiers | None) -> SeriesFragment:
        series_id = self.series_id(geo)
        series = await self._fetch_series(series_id)
        raw_catalog = series.get("catalog")
        if not isinstance(raw_catalog, dict):
            raw_catalog = {}
        catalog = SeriesCatalog(
            series_title=raw_catalog.get("series_title") or self.default_title,
            series_id=series.get("seriesID") or series_id,
            area=raw_catalog.get("area"),
            area_type=raw_catalog.get("area_type"),
            survey_name=raw_catalog.get("survey_name"),
            measure_data_type=raw_catalog.get("measure_data_type"),
        )
        points = self._parse_points(series_id, series["data"])
        self._log.debug("bls_series_parsed", series_id=series_id, points=len(points))
        return SeriesFragment(catalog=catalog, series=points)


class LaborForceSource(SeriesSource):
    """LAUS county series; subclasses pick the measure."""

    name = "BLS-LAUS"
    measure: str = ""
    calculations = True

    def series_id(self, geo: GeoIdentifiers | None) -> str:
        assert geo is not None
        return LAUS_COUNTY_SERIES.format(
            state=geo.state_fips, county=geo.county_fips, measure=self.measure
        )


class EmploymentSource(LaborForceSource):
    fragment_name = "employmentData"
    measure = LAUS_EMPLOYMENT
    default_title = "Employment"


class UnemploymentCountSource(LaborForceSource):
    fragment_name = "unemploymentData"
    measure = LAUS_UNEMPLOYMENT
    default_title = "Unemployment"


class UnemploymentRateSource(LaborForceSource):
    fragment_name = "unemploymentRate"
    measure = LAUS_UNEMPLOYMENT_RATE
    default_title = "Unemployment Rate"


class ConsumerSpendingSource(SeriesSource):
    """National CPI-U all items; keyed by address for stage uniformity."""

    name = "BLS-CPI"
    fragment_name = "consumerSpending"
    default_title = "All items in U.S. city average, all urban consumers, seasonally adjusted"
    start_year = 2015
    end_year = 2024

    def series_id(self, geo: GeoIdentifiers | None) -> str:
        return CPI_ALL_ITEMS_SERIES
