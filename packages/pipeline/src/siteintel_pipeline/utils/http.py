"""
utils/http.py — single-attempt JSON requests with typed failures.

Provider calls are never retried: a transport error or a non-2xx response
becomes UpstreamFailure carrying the upstream status and body, and a 2xx
response that is not JSON becomes ParseError.

Usage:
    from siteintel_pipeline.utils.http import request_json

    payload = await request_json("GET", url, provider="Census", params={...})
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from siteintel_shared.errors import ParseError, UpstreamFailure

log = structlog.get_logger(__name__)

# Upstream bodies are attached to errors for observability; keep them bounded
MAX_BODY_CHARS = 2000


def _body_of(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:MAX_BODY_CHARS]


async def request_json(
    method: str,
    url: str,
    *,
    provider: str,
    params: dict[str, Any] | None = None,
    json: Any = None,
    headers: dict[str, str] | None = None,
) -> Any:
    """
    Issue one HTTP request and return the decoded JSON body.

    Uses the httpx transport default timeout.

    Raises:
        UpstreamFailure: network error or non-2xx status.
        ParseError:      2xx response whose body is not JSON.
    """
    try:
        async with httpx.AsyncClient() as client:
            response = await client.request(
                method, url, params=params, json=json, headers=headers
            )
    except httpx.HTTPError as exc:
        log.warning("upstream_unreachable", provider=provider, url=url, error=str(exc))
        raise UpstreamFailure(provider, body=str(exc)) from exc

    if response.is_error:
        body = _body_of(response)
        log.warning(
            "upstream_error_status",
            provider=provider,
            url=url,
            status=response.status_code,
        )
        raise UpstreamFailure(provider, status_code=response.status_code, body=body)

    try:
        return response.json()
    except ValueError as exc:
        raise ParseError(
            f"{provider} returned a non-JSON response",
            details={"provider": provider, "body": response.text[:MAX_BODY_CHARS]},
        ) from exc
