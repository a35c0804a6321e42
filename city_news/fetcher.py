"""
HTTP fetching for provider APIs.

Providers talk JSON over GET. This module performs a single request with an
httpx AsyncClient and folds every outcome into a FetchResult; transport and
decoding failures become an error string instead of an exception, so callers
can classify the response without try/except around every call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class FetchResult:
    """Result of one provider request.

    Either payload will be populated (a response body was decoded) or error
    will be populated (the request or decoding failed). status_code may be
    None for network-level failures.

    Attributes:
        url: The endpoint that was requested (without query string)
        status_code: HTTP status code, or None if no response was received
        payload: Decoded JSON body, or None on error
        error: Error message if the request failed, None otherwise
    """
    url: str
    status_code: int | None
    payload: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, Any],
) -> FetchResult:
    """GET a JSON document.

    Non-2xx responses are not raised: their decoded body is returned so the
    caller can read the provider's error message.

    Args:
        client: Open async HTTP client
        url: Endpoint URL
        params: Query parameters; None values are dropped

    Returns:
        FetchResult with payload on any decoded response, or error on failure
    """
    query = {key: value for key, value in params.items() if value is not None}
    try:
        resp = await client.get(url, params=query)
    except httpx.HTTPError as exc:
        return FetchResult(url=url, status_code=None, error=f"{type(exc).__name__}: {exc}")

    try:
        payload = resp.json()
    except ValueError as exc:
        return FetchResult(
            url=url,
            status_code=resp.status_code,
            error=f"InvalidJSON: {exc}",
        )
    return FetchResult(url=url, status_code=resp.status_code, payload=payload)
