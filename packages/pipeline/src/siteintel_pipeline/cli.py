"""
cli.py — Click CLI entrypoint.

Usage:
    siteintel enrich --street-number 123 --street-name "Main St" \
        --city Springfield --state IL --zip 62701
    siteintel extract brochure.pdf
    siteintel latest
    siteintel serve --port 5000
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
import structlog

from siteintel_shared.config import settings
from siteintel_shared.errors import SiteIntelError
from siteintel_shared.models import Address
from siteintel_pipeline.utils.logging import configure_logging

log = structlog.get_logger(__name__)


def _emit(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _fail(exc: SiteIntelError) -> None:
    click.echo(json.dumps({"error": exc.to_dict()}, indent=2, default=str), err=True)
    raise SystemExit(1)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
def main(log_level: str) -> None:
    """siteintel enrichment pipeline."""
    configure_logging(log_level=log_level)


@main.command()
@click.option("--street-number", required=True)
@click.option("--street-name", required=True)
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True)
def enrich(street_number: str, street_name: str, city: str, state: str, zip_code: str) -> None:
    """Enrich an address with economic indicators and store the result."""
    from siteintel_pipeline.loaders.record_store import RecordStore
    from siteintel_pipeline.pipelines.enrichment import EnrichmentPipeline

    address = Address(
        street_number=street_number,
        street_name=street_name,
        city=city,
        state=state,
        zip_code=zip_code,
    )
    click.echo(f"Enriching: {address.oneline()}")
    try:
        pipeline = EnrichmentPipeline.default(RecordStore(), settings)
        record = asyncio.run(pipeline.run(address))
    except SiteIntelError as exc:
        _fail(exc)
    _emit(record.to_response())


@main.command()
@click.argument("pdf", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--address", "address_only", is_flag=True, help="Extract the NYC address only")
def extract(pdf: Path, address_only: bool) -> None:
    """Extract structured data from a PDF and store it."""
    from siteintel_pipeline.loaders.record_store import RecordStore
    from siteintel_pipeline.pipelines.documents import DocumentPipeline

    pipeline = DocumentPipeline(RecordStore(), settings=settings)
    data = pdf.read_bytes()
    try:
        if address_only:
            stored = asyncio.run(pipeline.enrich_address(data))
        else:
            stored = asyncio.run(pipeline.ingest(data))
    except SiteIntelError as exc:
        _fail(exc)
    _emit(stored.model_dump(by_alias=True, mode="json"))


@main.command()
@click.option(
    "--kind",
    type=click.Choice(["economics", "document"]),
    default="economics",
    show_default=True,
)
def latest(kind: str) -> None:
    """Print the most recently stored record."""
    from siteintel_pipeline.loaders.record_store import RecordStore
    from siteintel_pipeline.pipelines.documents import DocumentPipeline

    store = RecordStore()
    try:
        if kind == "document":
            document = asyncio.run(DocumentPipeline(store, settings=settings).latest())
            _emit(document.model_dump(by_alias=True, mode="json"))
            return
        record = asyncio.run(store.most_recent())
    except SiteIntelError as exc:
        _fail(exc)

    if record is None:
        click.echo("No records found.")
        return
    _emit(record.to_response())


@main.command()
@click.option("--host", default=settings.api_host, show_default=True)
@click.option("--port", default=settings.api_port, type=int, show_default=True)
@click.option("--reload", is_flag=True)
def serve(host: str, port: int, reload: bool) -> None:
    """Check the record store, then run the HTTP API."""
    import uvicorn

    from siteintel_pipeline.loaders.record_store import RecordStore

    try:
        asyncio.run(RecordStore().check_connection())
    except SiteIntelError as exc:
        _fail(exc)

    log.info("api_serve", host=host, port=port)
    uvicorn.run("siteintel_api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
