"""Shared test fixtures for siteintel-api."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from siteintel_shared.config import Settings
from siteintel_shared.models import Address, AggregateRecord, GeoIdentifiers


@pytest.fixture()
def api_settings() -> Settings:
    return Settings(_env_file=None, environment="test")


@pytest.fixture()
def enrichment_pipeline():
    pipeline = MagicMock()
    pipeline.run = AsyncMock()
    pipeline.latest = AsyncMock(return_value=None)
    return pipeline


@pytest.fixture()
def document_pipeline():
    pipeline = MagicMock()
    pipeline.ingest = AsyncMock()
    pipeline.list_documents = AsyncMock(return_value=[])
    pipeline.latest = AsyncMock()
    pipeline.enrich_address = AsyncMock()
    return pipeline


@pytest.fixture()
def ors_client():
    client = MagicMock()
    client.name = "OpenRouteService"
    client.travel_times = AsyncMock()
    return client


@pytest.fixture()
def tomtom_client():
    client = MagicMock()
    client.name = "TomTom"
    client.route = AsyncMock()
    return client


@pytest.fixture()
def assistant():
    fake = MagicMock()
    fake.name = "OpenAI"
    fake.ask = AsyncMock()
    return fake


@pytest.fixture()
def app(api_settings, enrichment_pipeline, document_pipeline, ors_client, tomtom_client, assistant):
    """Test FastAPI app with every collaborator replaced by a mock."""
    from siteintel_api import dependencies
    from siteintel_api.app import create_app

    application = create_app()
    application.dependency_overrides.update(
        {
            dependencies.get_settings: lambda: api_settings,
            dependencies.get_enrichment_pipeline: lambda: enrichment_pipeline,
            dependencies.get_document_pipeline: lambda: document_pipeline,
            dependencies.get_ors_client: lambda: ors_client,
            dependencies.get_tomtom_client: lambda: tomtom_client,
            dependencies.get_assistant: lambda: assistant,
        }
    )
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture()
def sample_record() -> AggregateRecord:
    return AggregateRecord(
        id="7",
        createdAt="2025-03-01T14:22:05Z",
        address=Address(
            street_number="123",
            street_name="Main St",
            city="Springfield",
            state="IL",
            zip_code="62701",
        ),
        geography=GeoIdentifiers(
            state_fips="17",
            county_fips="167",
            full_county_geoid="17167",
            state_area_code="1700000",
        ),
        fragments={
            "populationTrends": {
                "series": [
                    {"year": 2023, "population": 194672},
                    {"year": 2022, "population": 195348},
                ]
            },
            "medianIncomeTrends": {
                "series": [
                    {"year": 2022, "medianIncome": 67432},
                    {"year": 2023, "medianIncome": None},
                ]
            },
        },
    )
