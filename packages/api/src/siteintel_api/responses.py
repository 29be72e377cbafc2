"""Standardized API response wrappers."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse

from siteintel_shared.errors import SiteIntelError


def wrap_response(
    data: Any,
    *,
    total_count: int | None = None,
    source: str | None = None,
) -> dict[str, Any]:
    """Build a standardized API response dict."""
    meta = {"total_count": total_count, "source": source}
    return {
        "data": data,
        "meta": {k: v for k, v in meta.items() if v is not None},
    }


def error_response(
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a standardized error response dict."""
    err: dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return {"error": err}


def siteintel_error_response(exc: SiteIntelError) -> JSONResponse:
    """Render any SiteIntelError with its own HTTP status."""
    return JSONResponse(status_code=exc.http_status, content={"error": exc.to_dict()})
