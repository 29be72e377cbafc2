"""Free-form assistant endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from siteintel_pipeline.sources.assistant import Assistant

from siteintel_api.dependencies import get_assistant
from siteintel_api.responses import wrap_response

router = APIRouter(prefix="/assistant", tags=["assistant"])


class PromptRequest(BaseModel):
    prompt: str = Field(min_length=1)


@router.post("/prompt")
async def ask(body: PromptRequest, assistant: Assistant = Depends(get_assistant)):
    answer = await assistant.ask(body.prompt)
    return wrap_response(answer, source=assistant.name)
