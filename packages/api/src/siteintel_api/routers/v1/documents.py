"""PDF document endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from siteintel_shared.config import Settings
from siteintel_pipeline.pipelines.documents import DocumentPipeline

from siteintel_api.dependencies import get_document_pipeline, get_settings, read_pdf_upload
from siteintel_api.responses import wrap_response

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", status_code=201)
async def upload_document(
    file: UploadFile = File(...),
    pipeline: DocumentPipeline = Depends(get_document_pipeline),
    cfg: Settings = Depends(get_settings),
):
    """Extract the five-section structure from a PDF and store it."""
    data = await read_pdf_upload(file, cfg.upload_max_bytes)
    document = await pipeline.ingest(data)
    return wrap_response(document.model_dump(by_alias=True, mode="json"), source="Gemini")


@router.get("")
async def list_documents(pipeline: DocumentPipeline = Depends(get_document_pipeline)):
    """All stored documents, newest first."""
    documents = await pipeline.list_documents()
    data = [doc.model_dump(by_alias=True, mode="json") for doc in documents]
    return wrap_response(data, total_count=len(data))


@router.get("/latest")
async def get_latest_document(pipeline: DocumentPipeline = Depends(get_document_pipeline)):
    document = await pipeline.latest()
    return wrap_response(document.model_dump(by_alias=True, mode="json"))


@router.post("/address", status_code=201)
async def enrich_document_address(
    file: UploadFile = File(...),
    pipeline: DocumentPipeline = Depends(get_document_pipeline),
    cfg: Settings = Depends(get_settings),
):
    """Extract a NYC address from a PDF and store its Geoclient record."""
    data = await read_pdf_upload(file, cfg.upload_max_bytes)
    record = await pipeline.enrich_address(data)
    return wrap_response(record.model_dump(by_alias=True, mode="json"), source="NYCGeoclient")
