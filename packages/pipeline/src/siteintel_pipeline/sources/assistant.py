"""
sources/assistant.py — free-form JSON prompt against OpenAI.

Replies that are not valid JSON come back as {"rawText": ...}.
"""

from __future__ import annotations

from typing import Any

from openai import AsyncOpenAI

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.errors import ParseError
from siteintel_pipeline.sources.base import require_credential
from siteintel_pipeline.utils.llm import (
    chat_completion_text,
    make_openai_client,
    parse_model_json,
)


class Assistant:
    name = "OpenAI"

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self._client = client

    async def ask(self, prompt: str) -> Any:
        api_key = require_credential(self.settings.openai_api_key, "OPENAI_API_KEY")
        if self._client is None:
            self._client = make_openai_client(api_key)

        output = await chat_completion_text(
            self._client,
            provider=self.name,
            model=self.settings.assistant_model,
            temperature=0.2,
            response_format={"type": "json_object"},
            messages=[{"role": "user", "content": prompt}],
        )
        try:
            return parse_model_json(output, provider=self.name)
        except ParseError:
            return {"rawText": output}
