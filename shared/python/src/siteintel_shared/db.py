"""
db.py — Supabase client singletons.

Usage:
    from siteintel_shared.db import get_supabase_client

    supabase = get_supabase_client()                    # anon key (API reads)
    supabase = get_supabase_client(service_role=True)   # service key (writes)
"""

from __future__ import annotations

import threading
from typing import Optional

import structlog
from supabase import Client, create_client

from siteintel_shared.config import settings
from siteintel_shared.errors import ConfigurationMissing

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Supabase — one client per role per process (thread-safe via lock)
# ---------------------------------------------------------------------------
_supabase_lock = threading.Lock()
_supabase_anon: Optional[Client] = None
_supabase_service: Optional[Client] = None


def get_supabase_client(*, service_role: bool = False) -> Client:
    """
    Return a singleton Supabase client.

    Args:
        service_role: If True, uses the service role key (full DB access).
                      If False (default), uses the anon key (RLS applies).

    Returns:
        supabase.Client instance.

    Raises:
        ConfigurationMissing: if the key for the requested role is empty.
    """
    global _supabase_anon, _supabase_service

    with _supabase_lock:
        if service_role:
            if _supabase_service is None:
                if not settings.supabase_service_key:
                    raise ConfigurationMissing("SUPABASE_SERVICE_KEY")
                _supabase_service = create_client(
                    settings.supabase_url,
                    settings.supabase_service_key,
                )
                logger.info("supabase_client_created", role="service_role")
            return _supabase_service
        else:
            if _supabase_anon is None:
                if not settings.supabase_anon_key:
                    raise ConfigurationMissing("SUPABASE_ANON_KEY")
                _supabase_anon = create_client(
                    settings.supabase_url,
                    settings.supabase_anon_key,
                )
                logger.info("supabase_client_created", role="anon")
            return _supabase_anon


def reset_supabase_clients() -> None:
    """Reset singleton clients (useful in tests)."""
    global _supabase_anon, _supabase_service
    with _supabase_lock:
        _supabase_anon = None
        _supabase_service = None
