"""
Paginated retrieval of the unread Pocket list.

Pocket returns at most `page_size` items per request. The first page is
fetched alone; a short first page is the complete list. Otherwise the
following pages are requested in batches of `max_concurrent_requests`
concurrent requests, one batch after another, until a batch contains an
empty or failed page or the offset ceiling (`page_size * max_pages`) is
reached. The server-reported `total` is not consulted.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

from ..config import PocketConfig
from ..core.errors import PickpocketError
from ..utils.logging import log_event
from .client import Credentials, apost_form, create_async_client, decode_json

STATE_UNREAD = "unread"
DETAIL_TYPE = "simple"


@dataclass
class PageResult:
    """Result of one page request.

    items is None when the request failed or the body had no usable `list`;
    an empty dict means the page was valid but held no articles.

    Attributes:
        offset: Offset the page was requested at
        items: Mapping of article id to Pocket payload, or None on failure
        error: Error message if the page failed
        status_code: HTTP status code when the failure came with a response
    """
    offset: int
    items: dict[str, Any] | None
    error: str | None = None
    status_code: int | None = None

    @property
    def exhausted(self) -> bool:
        """True when pagination must stop after this page."""
        return not self.items


def page_params(credentials: Credentials, offset: int, page_size: int) -> dict[str, str]:
    return {
        **credentials.as_params(),
        "state": STATE_UNREAD,
        "count": str(page_size),
        "offset": str(offset),
        "detailType": DETAIL_TYPE,
    }


def _extract_items(data: dict[str, Any]) -> dict[str, Any] | None:
    items = data.get("list")
    if isinstance(items, dict):
        return items
    # Pocket encodes an empty list as [] rather than {}.
    if isinstance(items, list) and not items:
        return {}
    return None


async def fetch_page(
    client: httpx.AsyncClient,
    url: str,
    credentials: Credentials,
    offset: int,
    page_size: int,
    logger: logging.Logger | None = None,
) -> PageResult:
    """Fetch one page of unread articles.

    Transport and protocol errors are logged and reported through the
    returned PageResult; they never propagate to the caller.

    Args:
        client: Shared async HTTP client
        url: Retrieve endpoint
        credentials: Consumer key and access token
        offset: Index of the first item of the page
        page_size: Number of items requested
        logger: Logger for events

    Returns:
        PageResult with items on success or error message on failure
    """
    page_num = offset // page_size + 1
    log_event(
        logger,
        f"Retrieving page {page_num} (offset: {offset})",
        level=logging.DEBUG,
        event="page_request",
        offset=offset,
    )
    try:
        resp = await apost_form(client, url, page_params(credentials, offset, page_size))
        data = decode_json(resp)
    except PickpocketError as exc:
        log_event(
            logger,
            f"Error fetching page {page_num}: {exc}",
            level=logging.WARNING,
            event="page_failed",
            offset=offset,
            error=str(exc),
        )
        return PageResult(
            offset=offset,
            items=None,
            error=str(exc),
            status_code=getattr(exc, "status_code", None),
        )

    items = _extract_items(data)
    if items is None:
        log_event(
            logger,
            f"Page {page_num} has no article list",
            level=logging.WARNING,
            event="page_without_list",
            offset=offset,
        )
        return PageResult(
            offset=offset,
            items=None,
            error="Response has no 'list' field",
            status_code=resp.status_code,
        )

    log_event(
        logger,
        f"Page {page_num} contains {len(items)} items",
        level=logging.DEBUG,
        event="page_received",
        offset=offset,
        count=len(items),
    )
    return PageResult(offset=offset, items=items, status_code=resp.status_code)


def merge_pages(merged: dict[str, Any], pages: Iterable[PageResult]) -> bool:
    """Merge a batch of pages into `merged` by article id.

    Every non-empty page is merged whatever its position in the batch, so
    the resulting id set does not depend on page order.

    Returns:
        True if any page was empty or failed, meaning pagination is over
    """
    stop = False
    for page in pages:
        if page.exhausted:
            stop = True
            continue
        merged.update(page.items)
    return stop


async def retrieve_unread_async(
    cfg: PocketConfig,
    credentials: Credentials,
    logger: logging.Logger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any] | None:
    """Retrieve every unread article of the account.

    Args:
        cfg: Pocket configuration (endpoint, page size, limits)
        credentials: Consumer key and access token
        logger: Logger for events
        transport: Optional httpx transport, used by tests

    Returns:
        Mapping of article id to Pocket payload, or None if the first page
        could not be retrieved
    """
    page_size = max(1, int(cfg.page_size))
    batch_size = max(1, int(cfg.max_concurrent_requests))
    ceiling = page_size * max(0, int(cfg.max_pages))

    async with create_async_client(cfg, transport) as client:
        log_event(logger, "Retrieving first page of articles...", event="fetch_start")
        first = await fetch_page(client, cfg.retrieve_url, credentials, 0, page_size, logger)
        if first.items is None:
            log_event(
                logger,
                "Could not retrieve Pocket's data",
                level=logging.ERROR,
                event="fetch_failed",
                error=first.error,
            )
            return None

        merged = dict(first.items)
        log_event(
            logger,
            f"Retrieved {len(merged)} articles from first page",
            event="first_page",
            count=len(merged),
        )
        # A short page proves the list is exhausted.
        if len(merged) < page_size:
            return merged

        log_event(logger, "Fetching additional pages in parallel...", event="fetch_pages")
        offset = page_size
        while offset <= ceiling:
            offsets = []
            while len(offsets) < batch_size and offset <= ceiling:
                offsets.append(offset)
                offset += page_size

            pages = await asyncio.gather(
                *(
                    fetch_page(client, cfg.retrieve_url, credentials, page_offset, page_size, logger)
                    for page_offset in offsets
                )
            )
            if merge_pages(merged, pages):
                break
        else:
            log_event(
                logger,
                "Reached maximum number of pages, stopping pagination",
                level=logging.WARNING,
                event="page_ceiling",
                ceiling=ceiling,
            )

    log_event(logger, f"Total articles retrieved: {len(merged)}", event="fetch_complete", count=len(merged))
    return merged


def retrieve_unread(
    cfg: PocketConfig,
    credentials: Credentials,
    logger: logging.Logger | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any] | None:
    """Synchronous wrapper around retrieve_unread_async."""
    return asyncio.run(retrieve_unread_async(cfg, credentials, logger, transport))
