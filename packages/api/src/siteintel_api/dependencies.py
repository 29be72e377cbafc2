"""
Shared FastAPI dependencies.

Every collaborator a route needs comes through one of these providers so
tests can swap it with ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, UploadFile

from siteintel_shared.config import Settings, settings
from siteintel_pipeline.loaders.record_store import RecordStore
from siteintel_pipeline.pipelines.documents import DocumentPipeline
from siteintel_pipeline.pipelines.enrichment import EnrichmentPipeline
from siteintel_pipeline.sources.assistant import Assistant
from siteintel_pipeline.sources.routing import OpenRouteServiceClient, TomTomClient

from siteintel_api.responses import error_response

PDF_MEDIA_TYPE = "application/pdf"


def get_settings() -> Settings:
    return settings


def get_record_store() -> RecordStore:
    return RecordStore()


def get_enrichment_pipeline(
    store: RecordStore = Depends(get_record_store),
    cfg: Settings = Depends(get_settings),
) -> EnrichmentPipeline:
    return EnrichmentPipeline.default(store, cfg)


def get_document_pipeline(
    store: RecordStore = Depends(get_record_store),
    cfg: Settings = Depends(get_settings),
) -> DocumentPipeline:
    return DocumentPipeline(store, settings=cfg)


def get_ors_client(cfg: Settings = Depends(get_settings)) -> OpenRouteServiceClient:
    return OpenRouteServiceClient(cfg)


def get_tomtom_client(cfg: Settings = Depends(get_settings)) -> TomTomClient:
    return TomTomClient(cfg)


def get_assistant(cfg: Settings = Depends(get_settings)) -> Assistant:
    return Assistant(cfg)


async def read_pdf_upload(upload: UploadFile, max_bytes: int) -> bytes:
    """Return the upload's bytes; reject non-PDF (400) and oversized (413) files."""
    if upload.content_type != PDF_MEDIA_TYPE:
        raise HTTPException(
            status_code=400,
            detail=error_response(
                "INVALID_FILE_TYPE",
                "Invalid file type. PDF required.",
                details={"content_type": upload.content_type},
            ),
        )
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=error_response(
                "FILE_TOO_LARGE",
                f"File exceeds the {max_bytes // (1024 * 1024)} MB limit.",
                details={"max_bytes": max_bytes},
            ),
        )
    return data
