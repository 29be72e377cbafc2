"""
tests/test_sources/test_census_geocoder.py — Unit tests for CensusGeocoder.

HTTP is mocked with respx; fixture JSON mirrors an actual geocoder response.
"""

from __future__ import annotations

import httpx
import pytest
import respx

from siteintel_shared.errors import (
    AddressIncomplete,
    ResolutionNotFound,
    SchemaInvalid,
    UpstreamFailure,
)
from siteintel_shared.models import Address
from siteintel_pipeline.sources.census_geocoder import CensusGeocoder

GEOCODER_URL = "https://geocoding.geo.census.gov/geocoder/geographies/onelineaddress"


class TestResolve:
    @pytest.mark.asyncio
    async def test_resolves_all_four_identifiers(
        self, test_settings, springfield_address, load_fixture
    ):
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            route = router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(200, json=load_fixture("census_geocoder_match.json"))
            )
            geo = await resolver.resolve(springfield_address)

        assert geo.state_fips == "17"
        assert geo.county_fips == "167"
        assert geo.full_county_geoid == "17167"
        assert geo.state_area_code == "1700000"
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_sends_oneline_address_and_benchmark(
        self, test_settings, springfield_address, load_fixture
    ):
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            route = router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(200, json=load_fixture("census_geocoder_match.json"))
            )
            await resolver.resolve(springfield_address)

        params = route.calls[0].request.url.params
        assert params["address"] == "123 Main St, Springfield, IL 62701"
        assert params["benchmark"] == "Public_AR_Current"
        assert params["vintage"] == "Current_Current"
        assert params["format"] == "json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "field", ["street_number", "street_name", "city", "state", "zip_code"]
    )
    async def test_empty_field_raises_before_any_call(
        self, test_settings, springfield_address, field
    ):
        address = springfield_address.model_copy(update={field: ""})
        resolver = CensusGeocoder(test_settings)
        with respx.mock(assert_all_called=False) as router:
            route = router.route().mock(return_value=httpx.Response(200, json={}))
            with pytest.raises(AddressIncomplete) as exc_info:
                await resolver.resolve(address)

        assert not route.called
        assert len(exc_info.value.details["missing_fields"]) == 1

    @pytest.mark.asyncio
    async def test_no_match_raises_resolution_not_found(
        self, test_settings, load_fixture
    ):
        address = Address(
            streetNumber="1", streetName="Nowhere Rd", city="Faketown", state="ZZ", zipCode="00000"
        )
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(200, json=load_fixture("census_geocoder_no_match.json"))
            )
            with pytest.raises(ResolutionNotFound, match="County information not found"):
                await resolver.resolve(address)

    @pytest.mark.asyncio
    async def test_match_without_counties_raises(self, test_settings, springfield_address):
        payload = {"result": {"addressMatches": [{"geographies": {"States": []}}]}}
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            router.get(GEOCODER_URL).mock(return_value=httpx.Response(200, json=payload))
            with pytest.raises(ResolutionNotFound):
                await resolver.resolve(springfield_address)

    @pytest.mark.asyncio
    async def test_unknown_state_raises(self, test_settings, springfield_address):
        payload = {
            "result": {
                "addressMatches": [
                    {"geographies": {"Counties": [{"STATE": "99", "COUNTY": "001", "GEOID": "99001"}]}}
                ]
            }
        }
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            router.get(GEOCODER_URL).mock(return_value=httpx.Response(200, json=payload))
            with pytest.raises(ResolutionNotFound, match="State area code not found"):
                await resolver.resolve(springfield_address)

    @pytest.mark.asyncio
    async def test_server_error_is_upstream_failure(self, test_settings, springfield_address):
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(500, text="Internal Server Error")
            )
            with pytest.raises(UpstreamFailure) as exc_info:
                await resolver.resolve(springfield_address)

        assert exc_info.value.status_code == 500
        assert exc_info.value.details["upstream_body"] == "Internal Server Error"

    @pytest.mark.asyncio
    async def test_transport_error_is_upstream_failure(self, test_settings, springfield_address):
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            router.get(GEOCODER_URL).mock(side_effect=httpx.ConnectError("refused"))
            with pytest.raises(UpstreamFailure) as exc_info:
                await resolver.resolve(springfield_address)

        assert exc_info.value.status_code is None
        assert exc_info.value.provider == "CensusGeocoder"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("payload", "field"),
        [
            (["not", "an", "object"], "body"),
            ({"result": {"addressMatches": ["123 MAIN ST"]}}, "addressMatches[0]"),
            ({"result": {"addressMatches": [{"geographies": {"Counties": "17167"}}]}},
             "geographies.Counties"),
        ],
    )
    async def test_malformed_body_is_schema_invalid(
        self, test_settings, springfield_address, payload, field
    ):
        resolver = CensusGeocoder(test_settings)
        with respx.mock() as router:
            router.get(GEOCODER_URL).mock(return_value=httpx.Response(200, json=payload))
            with pytest.raises(SchemaInvalid) as exc_info:
                await resolver.resolve(springfield_address)

        assert exc_info.value.details["field"] == field
