"""
loaders/record_store.py — append-only record store backed by Supabase.

Every committed artifact is one row; rows are never updated. Reads return
the newest row by ``createdAt``.

  EconomicsData   — AggregateRecord from the enrichment pipeline
  GeminiResponse  — StructuredDocumentResult from document extraction
  Address         — raw NYC Geoclient payloads

Any client-side or PostgREST failure is re-raised as PersistenceFailure.

Usage:
    from siteintel_pipeline.loaders.record_store import RecordStore

    store = RecordStore()
    stored = await store.append(record)
    latest = await store.most_recent()
"""

from __future__ import annotations

from typing import Any

import structlog
from supabase import Client

from siteintel_shared.constants import (
    ADDRESSES_TABLE,
    CREATED_AT_COLUMN,
    DOCUMENTS_TABLE,
    ECONOMICS_TABLE,
)
from siteintel_shared.db import get_supabase_client
from siteintel_shared.errors import PersistenceFailure
from siteintel_shared.models import (
    AggregateRecord,
    GeoclientRecord,
    StructuredDocumentResult,
)
from siteintel_pipeline.utils.retry import with_retry

log = structlog.get_logger(__name__)


class RecordStore:
    """
    Handles all reads and writes of committed records.

    Uses the service role key so RLS is bypassed for pipeline writes.

    The methods are coroutines but the supabase client is synchronous: each
    ``.execute()`` blocks the event loop for the length of its round trip.
    """

    def __init__(self, client: Client | None = None) -> None:
        self._client = client if client is not None else get_supabase_client(service_role=True)

    # ------------------------------------------------------------------
    # EconomicsData
    # ------------------------------------------------------------------

    async def append(self, record: AggregateRecord) -> AggregateRecord:
        """Insert one aggregate record and return it as stored."""
        row = self._insert(ECONOMICS_TABLE, record.to_insert_dict())
        stored = AggregateRecord.from_db_row(row) if row else record
        log.info(
            "record_committed",
            table=ECONOMICS_TABLE,
            record_id=stored.id,
            county_geoid=record.geography.full_county_geoid,
            fragments=len(record.fragments),
        )
        return stored

    async def most_recent(self) -> AggregateRecord | None:
        row = self._latest(ECONOMICS_TABLE)
        return AggregateRecord.from_db_row(row) if row else None

    # ------------------------------------------------------------------
    # GeminiResponse
    # ------------------------------------------------------------------

    async def append_document(
        self, document: StructuredDocumentResult
    ) -> StructuredDocumentResult:
        row = self._insert(DOCUMENTS_TABLE, document.to_insert_dict())
        stored = StructuredDocumentResult.from_db_row(row) if row else document
        log.info("document_committed", table=DOCUMENTS_TABLE, record_id=stored.id)
        return stored

    async def list_documents(self) -> list[StructuredDocumentResult]:
        rows = self._select(DOCUMENTS_TABLE)
        return [StructuredDocumentResult.from_db_row(row) for row in rows]

    async def most_recent_document(self) -> StructuredDocumentResult | None:
        row = self._latest(DOCUMENTS_TABLE)
        return StructuredDocumentResult.from_db_row(row) if row else None

    # ------------------------------------------------------------------
    # Address
    # ------------------------------------------------------------------

    async def append_geoclient(self, record: GeoclientRecord) -> GeoclientRecord:
        row = self._insert(ADDRESSES_TABLE, record.to_insert_dict())
        stored = GeoclientRecord.model_validate(row) if row else record
        log.info("geoclient_record_committed", table=ADDRESSES_TABLE, record_id=stored.id)
        return stored

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------

    @with_retry(max_attempts=5, base_delay=5.0, retry_on=PersistenceFailure)
    async def check_connection(self) -> None:
        """Issue a trivial read; retried with backoff at process startup."""
        self._run(
            ECONOMICS_TABLE,
            "connect",
            lambda table: table.select("id").limit(1).execute(),
        )
        log.info("record_store_connected")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, table: str, operation: str, query: Any) -> Any:
        try:
            return query(self._client.table(table))
        except Exception as exc:
            log.error("record_store_failed", table=table, operation=operation, error=str(exc))
            raise PersistenceFailure(
                f"Failed to {operation} {table}",
                details={"table": table, "operation": operation},
            ) from exc

    def _insert(self, table: str, row: dict[str, Any]) -> dict[str, Any] | None:
        result = self._run(table, "insert", lambda t: t.insert(row).execute())
        data = result.data or []
        return data[0] if data else None

    def _latest(self, table: str) -> dict[str, Any] | None:
        result = self._run(
            table,
            "read",
            lambda t: t.select("*").order(CREATED_AT_COLUMN, desc=True).limit(1).execute(),
        )
        data = result.data or []
        return data[0] if data else None

    def _select(self, table: str) -> list[dict[str, Any]]:
        result = self._run(
            table,
            "read",
            lambda t: t.select("*").order(CREATED_AT_COLUMN, desc=True).execute(),
        )
        return list(result.data or [])
