"""
sources/census_geocoder.py — US Census Geocoder address resolution.

Resolves a street address to the county-level identifiers every indicator
source is keyed by.

Endpoint:
  GET /geographies/onelineaddress
      ?address=...&benchmark=Public_AR_Current&vintage=Current_Current&format=json

Response shape (trimmed):
  {
    "result": {
      "addressMatches": [
        {
          "matchedAddress": "123 MAIN ST, SPRINGFIELD, IL, 62701",
          "geographies": {
            "Counties": [{"STATE": "17", "COUNTY": "167", "GEOID": "17167", ...}]
          }
        }
      ]
    }
  }

Usage:
    resolver = CensusGeocoder()
    geo = await resolver.resolve(Address(streetNumber="123", ...))
    geo.full_county_geoid   # "17167"
"""

from __future__ import annotations

from typing import Any

import structlog

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.constants import STATE_AREA_CODES
from siteintel_shared.errors import AddressIncomplete, ResolutionNotFound, SchemaInvalid
from siteintel_shared.models import Address, GeoIdentifiers
from siteintel_pipeline.utils.http import request_json

log = structlog.get_logger(__name__)

BENCHMARK = "Public_AR_Current"
VINTAGE = "Current_Current"


class CensusGeocoder:
    """Resolves addresses to state/county FIPS via the Census Geocoder."""

    name = "CensusGeocoder"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings
        self._url = f"{self.settings.census_geocoder_url}/geographies/onelineaddress"

    async def resolve(self, address: Address) -> GeoIdentifiers:
        """
        Resolve an address to GeoIdentifiers with one geocoder call.

        Raises:
            AddressIncomplete:  any of the five address fields is empty
                                (checked before the network call).
            ResolutionNotFound: no match, no county, or an unknown state.
            SchemaInvalid:      the response body has an unexpected structure.
            UpstreamFailure:    the geocoder is unreachable or returned non-2xx.
        """
        missing = address.missing_fields()
        if missing:
            raise AddressIncomplete(
                "All address fields are required",
                details={"missing_fields": missing},
            )

        query = address.oneline()
        log.info("geocode_start", address=query)
        payload = await request_json(
            "GET",
            self._url,
            provider=self.name,
            params={
                "address": query,
                "benchmark": BENCHMARK,
                "vintage": VINTAGE,
                "format": "json",
            },
        )

        county = self._first_county(payload)
        if county is None:
            raise ResolutionNotFound(
                "County information not found",
                details={"address": query},
            )

        state_fips = str(county.get("STATE") or "")
        county_fips = str(county.get("COUNTY") or "")
        geoid = str(county.get("GEOID") or "")
        area_code = STATE_AREA_CODES.get(state_fips)

        if not (state_fips and county_fips and geoid):
            raise ResolutionNotFound(
                "County information not found",
                details={"address": query},
            )
        if area_code is None:
            raise ResolutionNotFound(
                "State area code not found",
                details={"state_fips": state_fips},
            )

        geo = GeoIdentifiers(
            state_fips=state_fips,
            county_fips=county_fips,
            full_county_geoid=geoid,
            state_area_code=area_code,
        )
        log.info("geocode_complete", address=query, county_geoid=geoid)
        return geo

    @staticmethod
    def _first_county(payload: Any) -> dict[str, Any] | None:
        """
        Return the first county of the first match, or None when there is no match.

        Raises:
            SchemaInvalid: a level of the response has the wrong JSON type.
        """

        def _expect(value: Any, kind: type, where: str) -> Any:
            if value is None:
                return kind()
            if not isinstance(value, kind):
                raise SchemaInvalid(
                    "Malformed geocoder response",
                    details={"field": where, "type": type(value).__name__},
                )
            return value

        body = _expect(payload, dict, "body")
        result = _expect(body.get("result"), dict, "result")
        matches = _expect(result.get("addressMatches"), list, "result.addressMatches")
        if not matches:
            return None
        match = _expect(matches[0], dict, "addressMatches[0]")
        geographies = _expect(match.get("geographies"), dict, "geographies")
        counties = _expect(geographies.get("Counties"), list, "geographies.Counties")
        if not counties:
            return None
        return _expect(counties[0], dict, "Counties[0]")
