"""
pipelines/documents.py — PDF document ingestion.

  ingest(pdf_bytes)          PDF → text → Gemini → StructuredDocumentResult,
                             appended to GeminiResponse
  list_documents()           every stored document, newest first
  latest()                   newest document; must have all five sections
  enrich_address(pdf_bytes)  PDF → Gemini address → NYC Geoclient,
                             raw response appended to Address

Nothing is persisted when extraction or validation fails.
"""

from __future__ import annotations

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.errors import AddressIncomplete, NoDataFound, SchemaInvalid
from siteintel_shared.models import GeoclientRecord, StructuredDocumentResult
from siteintel_pipeline.extractors.document import DocumentExtractor
from siteintel_pipeline.extractors.pdf import extract_text
from siteintel_pipeline.loaders.record_store import RecordStore
from siteintel_pipeline.sources.nyc_geoclient import NYCGeoclient
from siteintel_pipeline.utils.logging import get_logger

log = get_logger(__name__, pipeline="documents")


class DocumentPipeline:
    def __init__(
        self,
        store: RecordStore,
        extractor: DocumentExtractor | None = None,
        geoclient: NYCGeoclient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.store = store
        self.extractor = extractor or DocumentExtractor(self.settings)
        self.geoclient = geoclient or NYCGeoclient(self.settings)

    async def ingest(self, data: bytes) -> StructuredDocumentResult:
        text = extract_text(data)
        log.info("document_ingest_start", chars=len(text))
        result = await self.extractor.extract(text)
        return await self.store.append_document(result)

    async def list_documents(self) -> list[StructuredDocumentResult]:
        return await self.store.list_documents()

    async def latest(self) -> StructuredDocumentResult:
        """
        Raises:
            NoDataFound:   no document has been stored.
            SchemaInvalid: a section of the newest row is null.
        """
        document = await self.store.most_recent_document()
        if document is None:
            raise NoDataFound("No data found")
        if not document.is_complete():
            log.warning("document_incomplete", record_id=document.id)
            raise SchemaInvalid(
                "Incomplete data structure in database",
                details={"record_id": document.id},
            )
        return document

    async def enrich_address(self, data: bytes) -> GeoclientRecord:
        """
        Raises:
            AddressIncomplete: Gemini did not return house number, street and borough.
        """
        text = extract_text(data)
        address = await self.extractor.extract_address(text)
        if not (address["houseNumber"] and address["streetName"] and address["borough"]):
            raise AddressIncomplete(
                "Incomplete address data from AI.",
                details={"address": address},
            )

        payload = await self.geoclient.lookup(
            house_number=address["houseNumber"],
            street=address["streetName"],
            borough=address["borough"],
            zip_code=address["zip"],
        )
        stored = await self.store.append_geoclient(GeoclientRecord(datasource=payload))
        log.info("address_enriched", record_id=stored.id, borough=address["borough"])
        return stored
