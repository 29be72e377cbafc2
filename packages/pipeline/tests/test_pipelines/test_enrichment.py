"""
tests/test_pipelines/test_enrichment.py — EnrichmentPipeline, accumulator and run context.

Unit tests use in-memory stages; the end-to-end tests drive the real
sources with respx-mocked Census/BLS endpoints and a fake OpenAI client.
"""

from __future__ import annotations

import json
import re
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
import respx
from pydantic import ValidationError

from siteintel_shared.constants import FRAGMENT_NAMES
from siteintel_shared.errors import (
    AddressIncomplete,
    NoDataFound,
    PersistenceFailure,
    ResolutionNotFound,
    UpstreamFailure,
)
from siteintel_shared.models import AggregateRecord, GeoIdentifiers, UtilityRateFragment
from siteintel_pipeline.pipelines.enrichment import (
    DuplicateFragmentError,
    EnrichmentPipeline,
    PipelineAccumulator,
    RunContext,
    RunState,
)
from siteintel_pipeline.sources.base import BaseSource

GEOCODER_URL = "https://geocoding.geo.census.gov/geocoder/geographies/onelineaddress"
BLS_URL = "https://api.bls.gov/publicAPI/v2/timeseries/data"
ACS_URL_REGEX = r"https://api\.census\.gov/data/\d{4}/acs/acs1.*"


class RecordingSource(BaseSource):
    """In-memory stage that records its invocation order."""

    name = "Recording"

    def __init__(self, fragment_name: str, calls: list[str], fail_with: Exception | None = None):
        self.fragment_name = fragment_name
        super().__init__()
        self.calls = calls
        self.fail_with = fail_with

    async def fetch(self, geo: GeoIdentifiers | None) -> UtilityRateFragment:
        self.calls.append(self.fragment_name)
        if self.fail_with is not None:
            raise self.fail_with
        return UtilityRateFragment(source=self.fragment_name, rates={"stage": self.fragment_name})

    def get_metadata(self) -> dict[str, Any]:
        return {"source_name": self.name, "fragment": self.fragment_name}


def make_stages(calls: list[str], failures: dict[str, Exception] | None = None) -> list[BaseSource]:
    failures = failures or {}
    return [RecordingSource(name, calls, failures.get(name)) for name in FRAGMENT_NAMES]


@pytest.fixture
def resolver(springfield_geo) -> MagicMock:
    fake = MagicMock()
    fake.resolve = AsyncMock(return_value=springfield_geo)
    return fake


# ---------------------------------------------------------------------------
# PipelineAccumulator
# ---------------------------------------------------------------------------

class TestAccumulator:
    def test_snapshot_contains_address_geography_and_fragments(
        self, springfield_address, springfield_geo
    ):
        acc = PipelineAccumulator()
        acc.set_address(springfield_address, springfield_geo)
        acc.add_fragment("utilityRates", UtilityRateFragment(source="x.json", rates=[1, 2]))

        record = acc.snapshot()
        assert isinstance(record, AggregateRecord)
        assert record.address == springfield_address
        assert record.geography.full_county_geoid == "17167"
        assert record.fragments == {"utilityRates": {"source": "x.json", "rates": [1, 2]}}

    def test_duplicate_fragment_fails_loudly(self):
        acc = PipelineAccumulator()
        acc.add_fragment("utilityRates", UtilityRateFragment(source="a", rates={}))
        with pytest.raises(DuplicateFragmentError):
            acc.add_fragment("utilityRates", UtilityRateFragment(source="b", rates={}))

    def test_snapshot_without_address(self):
        with pytest.raises(AddressIncomplete):
            PipelineAccumulator().snapshot()

    def test_snapshot_is_immutable(self, springfield_address, springfield_geo):
        acc = PipelineAccumulator()
        acc.set_address(springfield_address, springfield_geo)
        record = acc.snapshot()
        with pytest.raises(ValidationError):
            record.id = "changed"


# ---------------------------------------------------------------------------
# RunContext
# ---------------------------------------------------------------------------

class TestRunContext:
    def test_terminal_state_is_final(self):
        ctx = RunContext()
        ctx.transition(RunState.RESOLVING, "geocode")
        ctx.transition(RunState.DONE)
        with pytest.raises(RuntimeError):
            ctx.transition(RunState.FETCHING, "employmentData")

    def test_fail_discards_partial_fragments(self):
        ctx = RunContext()
        ctx.accumulator.add_fragment("utilityRates", UtilityRateFragment(source="a", rates={}))
        ctx.transition(RunState.FETCHING, "incentives")
        error = NoDataFound("nothing")
        ctx.fail(error)

        assert ctx.state is RunState.FAILED
        assert ctx.error is error
        assert ctx.accumulator.fragment_names == []


# ---------------------------------------------------------------------------
# EnrichmentPipeline (in-memory stages)
# ---------------------------------------------------------------------------

class TestPipelineRun:
    @pytest.mark.asyncio
    async def test_runs_every_stage_in_order_and_commits_once(
        self, resolver, mock_store, springfield_address
    ):
        calls: list[str] = []
        pipeline = EnrichmentPipeline(resolver, make_stages(calls), mock_store)
        ctx = RunContext()

        record = await pipeline.run(springfield_address, context=ctx)

        assert calls == list(FRAGMENT_NAMES)
        assert list(record.fragments) == list(FRAGMENT_NAMES)
        mock_store.append.assert_awaited_once()
        assert ctx.state is RunState.DONE
        assert [state for state, _ in ctx.history] == [
            RunState.RESOLVING,
            *[RunState.FETCHING] * len(FRAGMENT_NAMES),
            RunState.COMMITTING,
            RunState.DONE,
        ]

    @pytest.mark.asyncio
    async def test_stage_three_failure_short_circuits(
        self, resolver, mock_store, springfield_address
    ):
        calls: list[str] = []
        stages = make_stages(calls, {"unemploymentData": NoDataFound("No unemploymentData data found")})
        pipeline = EnrichmentPipeline(resolver, stages, mock_store)
        ctx = RunContext()

        with pytest.raises(NoDataFound) as exc_info:
            await pipeline.run(springfield_address, context=ctx)

        assert calls == ["warehouseWagesPerHour", "employmentData", "unemploymentData"]
        assert exc_info.value.stage == "unemploymentData"
        mock_store.append.assert_not_called()
        assert ctx.state is RunState.FAILED
        assert ctx.stage_index == 3
        assert ctx.accumulator.fragment_names == []

    @pytest.mark.asyncio
    async def test_resolution_failure_runs_no_stage(self, resolver, mock_store, springfield_address):
        resolver.resolve.side_effect = ResolutionNotFound("County information not found")
        calls: list[str] = []
        pipeline = EnrichmentPipeline(resolver, make_stages(calls), mock_store)

        with pytest.raises(ResolutionNotFound) as exc_info:
            await pipeline.run(springfield_address)

        assert calls == []
        assert exc_info.value.stage == "geocode"
        mock_store.append.assert_not_called()

    @pytest.mark.asyncio
    async def test_persistence_failure_reported_at_commit(
        self, resolver, mock_store, springfield_address
    ):
        mock_store.append.side_effect = PersistenceFailure("Failed to insert EconomicsData")
        pipeline = EnrichmentPipeline(resolver, make_stages([]), mock_store)
        ctx = RunContext()

        with pytest.raises(PersistenceFailure) as exc_info:
            await pipeline.run(springfield_address, context=ctx)

        assert exc_info.value.stage == "commit"
        assert ctx.state is RunState.FAILED

    @pytest.mark.asyncio
    async def test_each_run_has_its_own_accumulator(
        self, resolver, mock_store, springfield_address
    ):
        calls: list[str] = []
        pipeline = EnrichmentPipeline(resolver, make_stages(calls), mock_store)

        first = await pipeline.run(springfield_address)
        second = await pipeline.run(springfield_address)

        assert first.fragments == second.fragments
        assert mock_store.append.await_count == 2

    def test_duplicate_stage_names_rejected(self, resolver, mock_store):
        calls: list[str] = []
        stages = [RecordingSource("employmentData", calls), RecordingSource("employmentData", calls)]
        with pytest.raises(ValueError):
            EnrichmentPipeline(resolver, stages, mock_store)

    @pytest.mark.asyncio
    async def test_latest_delegates_to_store(self, resolver, mock_store):
        pipeline = EnrichmentPipeline(resolver, make_stages([]), mock_store)
        assert await pipeline.latest() is None
        mock_store.most_recent.assert_awaited_once()


# ---------------------------------------------------------------------------
# End-to-end with real sources
# ---------------------------------------------------------------------------

def bls_responder(load_fixture, failures: dict[str, int] | None = None):
    failures = failures or {}

    def respond(request: httpx.Request) -> httpx.Response:
        series_id = json.loads(request.content)["seriesid"][0]
        for suffix, status in failures.items():
            if series_id.startswith(suffix) or series_id.endswith(suffix):
                return httpx.Response(status, text="Service Unavailable")
        if series_id.startswith("OEUS"):
            return httpx.Response(200, json=load_fixture("bls_oews_sample.json"))
        if series_id.startswith("LAUCN"):
            return httpx.Response(200, json=load_fixture("bls_laus_sample.json"))
        return httpx.Response(200, json=load_fixture("bls_cpi_sample.json"))

    return respond


def acs_responder(request: httpx.Request) -> httpx.Response:
    variable = request.url.params["get"]
    year = int(re.search(r"/data/(\d{4})/", str(request.url)).group(1))
    value = 190000 + year if variable == "B01003_001E" else 60000 + year
    return httpx.Response(200, json=[[variable, "state", "county"], [str(value), "17", "167"]])


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_springfield_produces_nine_fragments(
        self, test_settings, mock_store, fake_openai, springfield_address, load_fixture
    ):
        pipeline = EnrichmentPipeline.default(mock_store, test_settings)

        with respx.mock() as router, patch(
            "siteintel_pipeline.sources.incentives.make_openai_client", return_value=fake_openai
        ):
            router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(200, json=load_fixture("census_geocoder_match.json"))
            )
            bls = router.post(BLS_URL).mock(side_effect=bls_responder(load_fixture))
            router.get(url__regex=ACS_URL_REGEX).mock(side_effect=acs_responder)

            record = await pipeline.run(springfield_address)

        geo = record.geography
        assert (geo.state_fips, geo.county_fips, geo.full_county_geoid) == ("17", "167", "17167")
        assert set(record.fragments) == set(FRAGMENT_NAMES)
        assert record.fragments["warehouseWagesPerHour"]["hourlyWage"] == pytest.approx(19.87)
        assert record.fragments["populationTrends"]["series"][0] == {"year": 2014, "population": 192014}
        assert record.fragments["medianIncomeTrends"]["series"][0] == {"year": 2015, "medianIncome": 62015}
        assert record.fragments["incentives"]["programs"][0]["name"] == "179D"
        assert record.fragments["utilityRates"]["rates"]["electricity"]["commercialCentsPerKwh"] == 12.41
        assert bls.call_count == 5
        mock_store.append.assert_awaited_once()

        insert = record.to_insert_dict()
        assert insert["address"]["fullCountyGEOID"] == "17167"
        assert insert["address"]["streetName"] == "Main St"

    @pytest.mark.asyncio
    async def test_wage_503_fails_run_without_append(
        self, test_settings, mock_store, fake_openai, springfield_address, load_fixture
    ):
        pipeline = EnrichmentPipeline.default(mock_store, test_settings)

        with respx.mock(assert_all_called=False) as router, patch(
            "siteintel_pipeline.sources.incentives.make_openai_client", return_value=fake_openai
        ):
            router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(200, json=load_fixture("census_geocoder_match.json"))
            )
            bls = router.post(BLS_URL).mock(side_effect=bls_responder(load_fixture, {"OEUS": 503}))
            acs = router.get(url__regex=ACS_URL_REGEX).mock(side_effect=acs_responder)

            with pytest.raises(UpstreamFailure) as exc_info:
                await pipeline.run(springfield_address)

        assert exc_info.value.status_code == 503
        assert exc_info.value.details["upstream_status"] == 503
        assert exc_info.value.stage == "warehouseWagesPerHour"
        assert bls.call_count == 1
        assert not acs.called
        mock_store.append.assert_not_called()

    @pytest.mark.asyncio
    async def test_stage_three_upstream_failure_skips_remaining_stages(
        self, test_settings, mock_store, fake_openai, springfield_address, load_fixture
    ):
        pipeline = EnrichmentPipeline.default(mock_store, test_settings)

        with respx.mock(assert_all_called=False) as router, patch(
            "siteintel_pipeline.sources.incentives.make_openai_client", return_value=fake_openai
        ):
            router.get(GEOCODER_URL).mock(
                return_value=httpx.Response(200, json=load_fixture("census_geocoder_match.json"))
            )
            bls = router.post(BLS_URL).mock(
                side_effect=bls_responder(load_fixture, {"0000000004": 500})
            )
            acs = router.get(url__regex=ACS_URL_REGEX).mock(side_effect=acs_responder)

            with pytest.raises(UpstreamFailure) as exc_info:
                await pipeline.run(springfield_address)

        assert exc_info.value.stage == "unemploymentData"
        assert bls.call_count == 3
        assert not acs.called
        fake_openai.chat.completions.create.assert_not_called()
        mock_store.append.assert_not_called()
