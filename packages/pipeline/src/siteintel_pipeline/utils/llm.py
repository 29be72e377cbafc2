"""
utils/llm.py — helpers shared by the OpenAI- and Gemini-backed components.

Models often wrap JSON in markdown fences even when told not to; every
caller strips them the same way before decoding.
"""

from __future__ import annotations

import json
import re
from typing import Any

from openai import APIError, APIStatusError, AsyncOpenAI

from siteintel_shared.errors import ParseError, UpstreamFailure

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fence(text: str) -> str:
    """Remove a leading ```json / ``` fence and a trailing ``` fence."""
    cleaned = text.strip()
    cleaned = _FENCE_OPEN.sub("", cleaned)
    cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def parse_model_json(text: str | None, *, provider: str) -> Any:
    """
    Decode model output as JSON after stripping fences.

    Raises:
        ParseError: empty output or invalid JSON.
    """
    if not text:
        raise ParseError(f"{provider} returned an empty response")
    try:
        return json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"{provider} returned invalid JSON",
            details={"provider": provider, "error": str(exc), "output": text[:500]},
        ) from exc


def make_openai_client(api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(api_key=api_key)


async def chat_completion_text(
    client: AsyncOpenAI,
    *,
    provider: str,
    **request: Any,
) -> str | None:
    """
    Run one chat completion and return the first choice's content.

    Raises:
        UpstreamFailure: the provider returned an error status or was unreachable.
    """
    try:
        completion = await client.chat.completions.create(**request)
    except APIStatusError as exc:
        raise UpstreamFailure(provider, status_code=exc.status_code, body=exc.body) from exc
    except APIError as exc:
        raise UpstreamFailure(provider, body=str(exc)) from exc

    if not completion.choices:
        return None
    return completion.choices[0].message.content
