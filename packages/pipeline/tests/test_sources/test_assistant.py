"""
tests/test_sources/test_assistant.py — Unit tests for the free-form Assistant.
"""

from __future__ import annotations

import httpx
import openai
import pytest

from siteintel_shared.errors import UpstreamFailure
from siteintel_pipeline.sources.assistant import Assistant


@pytest.mark.asyncio
async def test_returns_parsed_json(test_settings, fake_openai, completion):
    fake_openai.chat.completions.create.return_value = completion('{"answer": 42}')
    answer = await Assistant(test_settings, client=fake_openai).ask("What is the answer?")

    assert answer == {"answer": 42}
    kwargs = fake_openai.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"] == [{"role": "user", "content": "What is the answer?"}]


@pytest.mark.asyncio
async def test_non_json_falls_back_to_raw_text(test_settings, fake_openai, completion):
    fake_openai.chat.completions.create.return_value = completion("forty-two")
    answer = await Assistant(test_settings, client=fake_openai).ask("What is the answer?")

    assert answer == {"rawText": "forty-two"}


@pytest.mark.asyncio
async def test_connection_error_is_upstream_failure(test_settings, fake_openai):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    fake_openai.chat.completions.create.side_effect = openai.APIConnectionError(request=request)

    with pytest.raises(UpstreamFailure) as exc_info:
        await Assistant(test_settings, client=fake_openai).ask("hello")
    assert exc_info.value.status_code is None
