"""Fetch a target page through one relay.

A single relay request is one attempt: the orchestrator owns retries.
Transport problems never raise here; they come back as a short error reason
("timeout", "connection", "503", "envelope", ...).
"""

import asyncio
from typing import Optional

import httpx

from og_preview.relays import RelayRegistry

ACCEPT_HEADER = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class RelayResponse:
    """Outcome of one relay request."""

    def __init__(
        self,
        body: Optional[str] = None,
        status: Optional[int] = None,
        error: Optional[str] = None,
    ):
        self.body = body
        self.status = status
        self.error = error  # None on success

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self) -> str:
        return f"RelayResponse(status={self.status}, error={self.error!r})"


def unwrap_envelope(payload: object, field: str) -> Optional[str]:
    """Pull the page body out of a JSON envelope, or None if it isn't there."""
    if not isinstance(payload, dict):
        return None
    body = payload.get(field)
    return body if isinstance(body, str) else None


async def _get(client: httpx.AsyncClient, url: str, timeout: float) -> httpx.Response:
    return await client.get(url, headers={"Accept": ACCEPT_HEADER}, timeout=timeout)


async def fetch_via_relay(
    client: httpx.AsyncClient,
    registry: RelayRegistry,
    target: str,
    relay_index: int,
    timeout: float,
) -> RelayResponse:
    """GET `target` through relay `relay_index`, bounded by `timeout` seconds."""
    relay = registry.endpoint(relay_index)
    relay_url = relay.build_url(target)

    try:
        # wait_for cancels the in-flight request once the budget is spent
        response = await asyncio.wait_for(_get(client, relay_url, timeout), timeout)
    except (httpx.TimeoutException, asyncio.TimeoutError):
        return RelayResponse(error="timeout")
    except httpx.ConnectError:
        return RelayResponse(error="connection")
    except httpx.HTTPError as e:
        return RelayResponse(error=type(e).__name__.lower())

    if not response.is_success:
        return RelayResponse(status=response.status_code, error=str(response.status_code))

    if registry.uses_envelope(relay_index):
        try:
            payload = response.json()
        except ValueError:
            return RelayResponse(status=response.status_code, error="envelope")
        body = unwrap_envelope(payload, relay.envelope_field)
        if body is None:
            return RelayResponse(status=response.status_code, error="envelope")
        return RelayResponse(body=body, status=response.status_code)

    return RelayResponse(body=response.text, status=response.status_code)
