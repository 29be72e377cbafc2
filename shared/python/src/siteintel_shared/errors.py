"""
errors.py — error taxonomy shared by the pipeline, the API and the CLI.

Every failure a stage can report is a SiteIntelError subclass. Each class
carries a stable ``error_code`` and the HTTP status the API answers with;
instances carry a human-readable message, optional structured details and
the name of the stage that raised them (set by the enrichment runner).

Usage:
    from siteintel_shared.errors import UpstreamFailure

    raise UpstreamFailure("BLS", status_code=503, body="Service Unavailable")
"""

from __future__ import annotations

from typing import Any


class SiteIntelError(Exception):
    """Base class for all siteintel failures."""

    error_code = "SITEINTEL_ERROR"
    http_status = 500

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
        stage: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.stage = stage

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"code": self.error_code, "message": self.message}
        details = dict(self.details)
        if self.stage:
            details["stage"] = self.stage
        if details:
            body["details"] = details
        return body


class AddressIncomplete(SiteIntelError):
    """An address field or a geographic identifier is missing."""

    error_code = "ADDRESS_INCOMPLETE"
    http_status = 400


class ConfigurationMissing(SiteIntelError):
    """A required credential or setting is not configured."""

    error_code = "CONFIGURATION_MISSING"
    http_status = 500

    def __init__(self, setting: str, **kwargs: Any) -> None:
        super().__init__(
            f"{setting} is not set",
            details={"setting": setting},
            **kwargs,
        )
        self.setting = setting


class ResolutionNotFound(SiteIntelError):
    """The geocoder returned no match, or the match has no county."""

    error_code = "RESOLUTION_NOT_FOUND"
    http_status = 404


class UpstreamFailure(SiteIntelError):
    """A provider call failed at the transport level or returned non-2xx."""

    error_code = "UPSTREAM_FAILURE"
    http_status = 502

    def __init__(
        self,
        provider: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        if message is None:
            message = f"{provider} request failed"
            if status_code is not None:
                message = f"{message} with HTTP {status_code}"
        details: dict[str, Any] = {"provider": provider}
        if status_code is not None:
            details["upstream_status"] = status_code
        if body is not None:
            details["upstream_body"] = body
        super().__init__(message, details=details, **kwargs)
        self.provider = provider
        self.status_code = status_code
        self.body = body


class NoDataFound(SiteIntelError):
    """The provider answered, but has nothing for this geography."""

    error_code = "NO_DATA_FOUND"
    http_status = 404


class ParseError(SiteIntelError):
    """A payload (PDF, JSON, model output) could not be parsed."""

    error_code = "PARSE_ERROR"
    http_status = 422


class SchemaInvalid(SiteIntelError):
    """A parsed payload does not have the required structure."""

    error_code = "SCHEMA_INVALID"
    http_status = 502


class PersistenceFailure(SiteIntelError):
    """The record store rejected a read or write."""

    error_code = "PERSISTENCE_FAILURE"
    http_status = 500
