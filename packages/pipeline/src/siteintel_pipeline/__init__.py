"""
siteintel_pipeline — enrichment and document workers for siteintel.

Architecture:
  sources/     — one module per external provider (Census, BLS, OpenAI, NYC, ...)
  extractors/  — PDF text extraction and Gemini structured extraction
  loaders/     — append-only Supabase record store
  pipelines/   — orchestrators: address enrichment, document ingestion
  utils/       — structlog configuration, httpx helper, retry decorator, LLM helpers

Quick start:
    import asyncio
    from siteintel_shared.models import Address
    from siteintel_pipeline.pipelines.enrichment import run

    record = asyncio.run(run(Address(streetNumber="123", streetName="Main St",
                                     city="Springfield", state="IL", zipCode="62701")))

CLI:
    siteintel enrich --street-number 123 --street-name "Main St" ...
    siteintel extract brochure.pdf
    siteintel latest
"""

__version__ = "0.1.0"
