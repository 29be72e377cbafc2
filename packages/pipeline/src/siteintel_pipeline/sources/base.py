"""
sources/base.py — Abstract base class for all indicator sources.

Each concrete source must implement:
  fetch()        — call the provider and return one IndicatorFragment
  get_metadata() — return dict with source info for logging

The run() method checks preconditions, then calls fetch() with timing and
structured logging. The enrichment pipeline calls run() rather than fetch().

Precondition order is fixed: the credential is checked first, then the
geography, and both before any network call.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import structlog

from siteintel_shared.config import Settings, settings as default_settings
from siteintel_shared.errors import AddressIncomplete, ConfigurationMissing
from siteintel_shared.models import GeoIdentifiers, IndicatorFragment

log = structlog.get_logger(__name__)


def require_credential(value: str, env_name: str) -> str:
    """Return value, or raise ConfigurationMissing naming the variable."""
    if not value:
        raise ConfigurationMissing(env_name)
    return value


class BaseSource(ABC):
    """Abstract base for the enrichment stage sources."""

    # Override in subclass — used for logging and UpstreamFailure.provider
    name: str = "unknown"
    # AggregateRecord key this source fills
    fragment_name: str = ""
    # Settings attribute holding the credential; env var is its upper-case form
    credential_setting: str | None = None
    requires_geography: bool = True

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings
        self._log = log.bind(source_name=self.name, fragment=self.fragment_name)

    @property
    def credential(self) -> str:
        if self.credential_setting is None:
            return ""
        return getattr(self.settings, self.credential_setting)

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    async def fetch(self, geo: GeoIdentifiers | None) -> IndicatorFragment:
        """
        Fetch one fragment from the provider.

        Called only after preconditions passed. Implementations issue a
        single request per logical query and never retry.
        """
        ...

    @abstractmethod
    def get_metadata(self) -> dict[str, Any]:
        """Return source-level metadata (name, endpoint, description)."""
        ...

    # ------------------------------------------------------------------
    # Orchestration — pipelines call this
    # ------------------------------------------------------------------

    def check_preconditions(self, geo: GeoIdentifiers | None) -> None:
        """
        Raises:
            ConfigurationMissing: the credential is not configured.
            AddressIncomplete:    identifiers missing on a geo-dependent source.
        """
        if self.credential_setting is not None:
            require_credential(self.credential, self.credential_setting.upper())
        if self.requires_geography and geo is None:
            raise AddressIncomplete("Address information is incomplete")

    async def run(self, geo: GeoIdentifiers | None) -> IndicatorFragment:
        """
        Check preconditions, then fetch with timing and structured logging.

        Raises:
            Any SiteIntelError from the preconditions or fetch(), after logging.
        """
        self.check_preconditions(geo)

        run_log = self._log.bind(
            county_geoid=geo.full_county_geoid if geo is not None else None
        )
        run_log.info("source_run_start")

        t0 = time.monotonic()
        try:
            fragment = await self.fetch(geo)
        except Exception as exc:
            run_log.error(
                "source_run_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise

        run_log.info(
            "source_run_complete",
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        return fragment
