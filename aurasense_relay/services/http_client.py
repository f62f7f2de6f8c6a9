"""
Connection pool shared by the two outbound calls of a reading: prediction API POST and Firestore PATCH.
Created once by the app lifespan; readings never open their own client.
"""
from __future__ import annotations

import httpx

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Client used by prediction_client and display_writer. Raises if the lifespan has not started it."""
    if _http_client is None:
        raise RuntimeError("HTTP client not initialized; ensure app lifespan has run init_http_client().")
    return _http_client


def init_http_client(
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Start the pool with HTTP_TIMEOUT_SECONDS as the per-call timeout. Idempotent.

    Tests pass an httpx.MockTransport so neither upstream is contacted.
    """
    global _http_client
    if _http_client is not None:
        return _http_client
    _http_client = httpx.AsyncClient(timeout=timeout, transport=transport)
    return _http_client


async def close_http_client() -> None:
    """Drop the pool at shutdown; a later init_http_client() starts a new one."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
