"""
HTTP plumbing shared by the Pocket API calls.

Every Pocket endpoint takes a form-encoded POST. The helpers here build the
httpx clients and convert failures into the package's error types:
- network-level failures become TransportError
- non-success statuses and unusable bodies become ProtocolError
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from ..config import PocketConfig
from ..core.errors import ProtocolError, TransportError


@dataclass(frozen=True)
class Credentials:
    """Parameters that authenticate every retrieve/send request.

    Attributes:
        consumer_key: Pocket application consumer key
        access_token: User access token obtained by the OAuth handshake
    """
    consumer_key: str
    access_token: str

    def as_params(self) -> dict[str, str]:
        return {"consumer_key": self.consumer_key, "access_token": self.access_token}


def _headers(cfg: PocketConfig) -> dict[str, str]:
    return {"User-Agent": cfg.user_agent, "X-Accept": "application/json"}


def create_client(
    cfg: PocketConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    return httpx.Client(
        timeout=cfg.timeout_seconds,
        headers=_headers(cfg),
        trust_env=cfg.trust_env,
        transport=transport,
    )


def create_async_client(
    cfg: PocketConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=cfg.timeout_seconds,
        headers=_headers(cfg),
        trust_env=cfg.trust_env,
        transport=transport,
    )


def post_form(client: httpx.Client, url: str, data: dict[str, str]) -> httpx.Response:
    """POST form data, raising TransportError on network failure."""
    try:
        return client.post(url, data=data)
    except httpx.HTTPError as exc:
        raise TransportError(f"{type(exc).__name__}: {exc}") from exc


async def apost_form(client: httpx.AsyncClient, url: str, data: dict[str, str]) -> httpx.Response:
    """Async counterpart of post_form."""
    try:
        return await client.post(url, data=data)
    except httpx.HTTPError as exc:
        raise TransportError(f"{type(exc).__name__}: {exc}") from exc


def check_status(resp: httpx.Response) -> None:
    if not resp.is_success:
        raise ProtocolError(
            f"HTTP {resp.status_code}: {resp.text[:200]}",
            status_code=resp.status_code,
        )


def decode_json(resp: httpx.Response) -> dict[str, Any]:
    """Return the JSON object of a successful response.

    Raises:
        ProtocolError: Non-success status, invalid JSON, or a non-object body
    """
    check_status(resp)
    try:
        data = resp.json()
    except ValueError as exc:
        raise ProtocolError(f"Invalid JSON body: {exc}", status_code=resp.status_code) from exc
    if not isinstance(data, dict):
        raise ProtocolError(
            f"Expected a JSON object, got {type(data).__name__}",
            status_code=resp.status_code,
        )
    return data
