"""
sources/nyc_geoclient.py — NYC Geoclient v2 address lookup.

Endpoint:
  GET /address.json?houseNumber=280&street=Richard Street&borough=Brooklyn&zip=11208
  Header: Ocp-Apim-Subscription-Key

The response is stored verbatim; it carries BBL, BIN, coordinates and
dozens of administrative districts.
"""

from __future__ import annotations

from typing import Any

import structlog

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.errors import AddressIncomplete
from siteintel_pipeline.sources.base import require_credential
from siteintel_pipeline.utils.http import request_json

log = structlog.get_logger(__name__)


class NYCGeoclient:
    name = "NYCGeoclient"

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    async def lookup(
        self,
        *,
        house_number: str,
        street: str,
        borough: str,
        zip_code: str = "",
    ) -> dict[str, Any]:
        """
        Raises:
            ConfigurationMissing: NYC_GEO_KEY is not set.
            AddressIncomplete:    house number, street or borough is empty.
            UpstreamFailure:      Geoclient unreachable or non-2xx.
        """
        api_key = require_credential(self.settings.nyc_geo_key, "NYC_GEO_KEY")
        if not (house_number and street and borough):
            raise AddressIncomplete("Incomplete address data from AI.")

        log.info("geoclient_lookup", house_number=house_number, street=street, borough=borough)
        payload = await request_json(
            "GET",
            f"{self.settings.nyc_geoclient_url}/address.json",
            provider=self.name,
            params={
                "houseNumber": house_number,
                "street": street,
                "borough": borough,
                "zip": zip_code,
            },
            headers={"Ocp-Apim-Subscription-Key": api_key},
        )
        return payload if isinstance(payload, dict) else {"result": payload}
