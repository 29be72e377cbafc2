"""
sources/incentives.py — federal business tax incentives via OpenAI web search.

The model is asked to read irs.gov/credits-deductions and return a strict
JSON array of commercial tax credits. Output that is not valid JSON is kept
verbatim as ``rawText`` rather than failing the stage; provider errors fail
the stage.

This stage does not depend on the resolved geography.
"""

from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI

from siteintel_shared.config import Settings
from siteintel_shared.errors import ParseError
from siteintel_shared.models import GeoIdentifiers, TaxIncentiveFragment
from siteintel_pipeline.sources.base import BaseSource
from siteintel_pipeline.utils.llm import (
    chat_completion_text,
    make_openai_client,
    parse_model_json,
)

INCENTIVES_PROMPT = (
    "Visit https://www.irs.gov/credits-deductions and extract all current "
    "commercial or business-related federal tax credits. Return strict JSON "
    "only: an array where each object includes name, type, description, "
    "impact_per_sf (if any), expandable_bullets, urls and action_required, "
    "without markdown or backticks. Only return the raw JSON. Focus on "
    "incentives like 179D, NMTC, or R&D Credit."
)


class TaxIncentiveSource(BaseSource):
    name = "OpenAI"
    fragment_name = "incentives"
    credential_setting = "openai_api_key"
    requires_geography = False

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        super().__init__(settings)
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = make_openai_client(self.credential)
        return self._client

    async def fetch(self, geo: GeoIdentifiers | None) -> TaxIncentiveFragment:
        output = await chat_completion_text(
            self.client,
            provider=self.name,
            model=self.settings.incentives_model,
            web_search_options={},
            messages=[{"role": "user", "content": INCENTIVES_PROMPT}],
        )
        try:
            parsed = parse_model_json(output, provider=self.name)
        except ParseError:
            self._log.warning("incentives_not_json", length=len(output or ""))
            return TaxIncentiveFragment(raw_text=output or "")

        if isinstance(parsed, dict):
            parsed = [parsed]
        if not isinstance(parsed, list):
            return TaxIncentiveFragment(raw_text=output)
        programs = [item for item in parsed if isinstance(item, dict)]
        return TaxIncentiveFragment(programs=programs)

    def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "model": self.settings.incentives_model,
            "description": "Federal commercial tax credits from irs.gov via web search",
        }
