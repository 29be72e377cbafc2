"""
extractors/document.py — Gemini-backed structured extraction.

Two prompts share one client:

  extract(text)          → StructuredDocumentResult with the five sections
                           supply_pipeline, land_sale_comparables,
                           demographic_trends, proximity_insights,
                           zoning_overlays
  extract_address(text)  → {"houseNumber", "streetName", "borough", "zip"}

Document text is truncated to ``settings.pdf_char_budget`` characters
before it is sent.

Usage:
    extractor = DocumentExtractor()
    result = await extractor.extract(pdf_text)
    result.zoning_overlays
"""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

import structlog
from google import genai
from google.genai import errors as genai_errors

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.constants import DOCUMENT_SECTIONS
from siteintel_shared.errors import ParseError, SchemaInvalid, UpstreamFailure
from siteintel_shared.models import StructuredDocumentResult
from siteintel_pipeline.sources.base import require_credential
from siteintel_pipeline.utils.llm import parse_model_json

log = structlog.get_logger(__name__)

PROVIDER = "Gemini"

DOCUMENT_PROMPT = """\
Analyze this real estate document and return a complete and structured JSON object \
strictly matching the following format. Ensure all sections are included, even if some \
values are null or empty. Do not omit any fields.

1. supply_pipeline: {
  nearby_developments: {supply: string, name: string, description: string, tenant: string}[],
  construction_timelines: {project: string, completion: string, name: string, address: string,
    distance: string, status: string, progress: number, size: string, type: string,
    developer: string, tenant: string, description: string}[],
  property_type_mix: {type: string, percentage: number}[]
}

2. land_sale_comparables: {
  price_per_sqft: number,
  zoning: string,
  parcel_size: string[],
  recent_sales: {address: string, price: number, date: string, size: number, buyers: string,
    price_psf: number, submarket: string, cap_rate: string, tenant: string}[]
}

3. demographic_trends: {
  population_growth: {insights: string, description: string, year: string, capital: string,
    population: number, state: string}[],
  income: {insights: string, description: string, income: number, year: string}[],
  spending: {insights: string, description: string, amount: number, category: string}[]
}

4. proximity_insights: {
  highways: {state: string, sign: number, name: string, distance: string, time_traveled: string}[],
  ports: {name: string, distance: string, insights: string}[],
  airports: {name: string, distance: string}[],
  major_tenants: {name: string, company: string}[],
  key_location: {location: string, distance: number, time: number, insight: string}[]
}

5. zoning_overlays: {
  code: string[],
  description: string[],
  municipal_reference: string[],
  link: string[]
}[]

- Carefully extract and map the relevant data from the PDF to this format.
- Return only valid JSON.

PDF Content:
"""

ADDRESS_PROMPT = """\
Extract the address from this real estate PDF and return JSON like:
{
  "houseNumber": "280",
  "streetName": "Richard Street",
  "borough": "Brooklyn",
  "zip": "11208"
}

PDF:
"""


class DocumentExtractor:
    """Sends document text to Gemini and validates the JSON it returns."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: genai.Client | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            api_key = require_credential(self.settings.gemini_api_key, "GEMINI_API_KEY")
            self._client = genai.Client(api_key=api_key)
        return self._client

    def truncate(self, text: str) -> str:
        return text[: self.settings.pdf_char_budget]

    async def extract(self, text: str) -> StructuredDocumentResult:
        """
        Extract the five-section structure from document text.

        Raises:
            ConfigurationMissing: GEMINI_API_KEY is not set.
            UpstreamFailure:      Gemini returned an error.
            ParseError:           the reply is not JSON.
            SchemaInvalid:        the JSON is not an object or lacks a section.
        """
        payload = await self._generate_json(DOCUMENT_PROMPT + self.truncate(text))

        if not isinstance(payload, dict):
            raise SchemaInvalid(
                "AI returned unstructured or incomplete JSON.",
                details={"type": type(payload).__name__},
            )
        missing = [section for section in DOCUMENT_SECTIONS if section not in payload]
        if missing:
            log.error("document_schema_invalid", missing_sections=missing)
            raise SchemaInvalid(
                "AI returned unstructured or incomplete JSON.",
                details={"missing_sections": missing},
            )

        result = StructuredDocumentResult(
            **{section: payload[section] for section in DOCUMENT_SECTIONS}
        )
        if self.settings.debug_write:
            self._write_debug(payload)
        return result

    async def extract_address(self, text: str) -> dict[str, str]:
        """
        Extract a street address (house number, street, borough, zip).

        Missing keys come back as empty strings; the caller decides which
        fields are required.
        """
        payload = await self._generate_json(ADDRESS_PROMPT + self.truncate(text))
        if not isinstance(payload, dict):
            raise SchemaInvalid("Incomplete address data from AI.")
        return {
            key: str(payload.get(key) or "").strip()
            for key in ("houseNumber", "streetName", "borough", "zip")
        }

    async def _generate_json(self, prompt: str) -> Any:
        t0 = time.monotonic()
        try:
            response = await self.client.aio.models.generate_content(
                model=self.settings.gemini_model,
                contents=prompt,
            )
        except genai_errors.APIError as exc:
            log.error("gemini_request_failed", status=exc.code, error=exc.message)
            raise UpstreamFailure(
                PROVIDER,
                status_code=exc.code,
                body=exc.details if exc.details is not None else exc.message,
            ) from exc

        log.info(
            "gemini_response",
            model=self.settings.gemini_model,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        text = response.text
        try:
            return parse_model_json(text, provider=PROVIDER)
        except ParseError:
            log.error("gemini_unparseable", output=(text or "")[:500])
            raise

    def _write_debug(self, payload: dict[str, Any]) -> None:
        storage = Path(self.settings.storage_dir)
        storage.mkdir(parents=True, exist_ok=True)
        path = storage / f"parsed-{int(time.time() * 1000)}.json"
        path.write_text(json.dumps(payload, indent=2))
        log.debug("debug_output_written", path=str(path))
