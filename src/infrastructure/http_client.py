"""Shared ``httpx.AsyncClient`` for all outbound provider calls."""

import httpx

from src.config import settings


def build_http_client(
    timeout_seconds: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Return a client with a per-call timeout; *transport* is for tests."""
    return httpx.AsyncClient(
        timeout=timeout_seconds or settings.http_timeout_seconds,
        transport=transport,
        follow_redirects=True,
    )
