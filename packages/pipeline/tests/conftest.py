"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()        — resolves paths to tests/fixtures/
  load_fixture()        — parsed JSON from tests/fixtures/
  test_settings         — Settings with every credential set, no .env read
  springfield_*         — the reference address and its identifiers
  mock_supabase_client  — MagicMock of the Supabase client (prevents real DB calls)
  mock_store            — AsyncMock-backed RecordStore stand-in
  fake_openai           — AsyncOpenAI stand-in with a scripted completion
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from siteintel_shared.config import Settings
from siteintel_shared.models import Address, GeoIdentifiers
from siteintel_pipeline.loaders.record_store import RecordStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


def read_fixture(name: str) -> Any:
    return json.loads((FIXTURES_DIR / name).read_text())


@pytest.fixture
def load_fixture():
    return read_fixture


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Every credential populated; utility rates copied into tmp_path."""
    rates = tmp_path / "utilitiesRatesAndPremiums.json"
    rates.write_text((FIXTURES_DIR / "utility_rates_sample.json").read_text())
    return Settings(
        _env_file=None,
        environment="test",
        supabase_service_key="service-test-key",
        bls_api_key="bls-test-key",
        census_api_key="census-test-key",
        openai_api_key="sk-test",
        gemini_api_key="gemini-test-key",
        nyc_geo_key="nyc-test-key",
        ors_api_key="ors-test-key",
        tomtom_api_key="tomtom-test-key",
        utility_rates_path=str(rates),
        storage_dir=str(tmp_path / "storage"),
    )


# ---------------------------------------------------------------------------
# Reference address
# ---------------------------------------------------------------------------

@pytest.fixture
def springfield_address() -> Address:
    return Address(
        street_number="123",
        street_name="Main St",
        city="Springfield",
        state="IL",
        zip_code="62701",
    )


@pytest.fixture
def springfield_geo() -> GeoIdentifiers:
    return GeoIdentifiers(
        state_fips="17",
        county_fips="167",
        full_county_geoid="17167",
        state_area_code="1700000",
    )


# ---------------------------------------------------------------------------
# Supabase client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """
    A MagicMock that simulates the supabase.Client interface.

    insert().execute() and every select chain return empty data by default.
    Override in individual tests via the .table.return_value chain.
    """
    client = MagicMock()

    default_result = MagicMock()
    default_result.data = []

    table = client.table.return_value
    table.insert.return_value.execute.return_value = default_result
    table.select.return_value.execute.return_value = default_result
    table.select.return_value.limit.return_value.execute.return_value = default_result
    table.select.return_value.order.return_value.execute.return_value = default_result
    (
        table.select.return_value
        .order.return_value
        .limit.return_value
        .execute.return_value
    ) = default_result

    return client


@pytest.fixture
def mock_store() -> MagicMock:
    """RecordStore stand-in whose append() echoes the record back."""
    store = MagicMock(spec=RecordStore)
    store.append = AsyncMock(side_effect=lambda record: record)
    store.most_recent = AsyncMock(return_value=None)
    store.append_document = AsyncMock(side_effect=lambda document: document)
    store.list_documents = AsyncMock(return_value=[])
    store.most_recent_document = AsyncMock(return_value=None)
    store.append_geoclient = AsyncMock(side_effect=lambda record: record)
    return store


# ---------------------------------------------------------------------------
# LLM client doubles
# ---------------------------------------------------------------------------

def make_completion(content: str | None) -> MagicMock:
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=content))]
    return completion


@pytest.fixture
def completion():
    """Factory for chat completion results: completion("...")."""
    return make_completion


@pytest.fixture
def fake_openai() -> MagicMock:
    """AsyncOpenAI stand-in; set .chat.completions.create.return_value per test."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=make_completion('[{"name": "179D", "type": "deduction"}]')
    )
    return client


@pytest.fixture
def fake_gemini() -> MagicMock:
    """google.genai.Client stand-in; set .aio.models.generate_content per test."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=MagicMock(text="{}"))
    return client
