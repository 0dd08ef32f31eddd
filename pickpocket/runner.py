"""
Reconciliation between the local library and Pocket.

A renew cycle coordinates the whole sync:
1. Load the local library
2. Delete every locally read article from Pocket
3. Retrieve the complete unread list from Pocket
4. Replace the local library with the retrieved list

The delete step is not undone when the retrieval fails, and the previous
unread bucket is discarded rather than merged: Pocket is the source of truth
for what is unread.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .api.actions import delete
from .api.client import Credentials
from .api.fetcher import retrieve_unread
from .config import AppConfig, get_consumer_key
from .auth.tokens import TokenHandler
from .core.types import Article, Inventory, Library, article_from_payload
from .store import InventoryStore
from .utils.logging import log_event

_SAMPLE_SIZE = 3


@dataclass
class LibraryStatus:
    """Article counts of the local library."""
    read: int
    unread: int


def load_credentials(cfg: AppConfig, tokens: TokenHandler) -> Credentials:
    return Credentials(
        consumer_key=get_consumer_key(cfg.pocket),
        access_token=tokens.read_access_token(),
    )


def build_inventory(payloads: dict[str, Any], logger: logging.Logger | None = None) -> Inventory:
    """Convert retrieved Pocket payloads into an Inventory."""
    inventory = Inventory()
    for article_id, payload in payloads.items():
        if not isinstance(payload, dict):
            log_event(
                logger,
                f"Skipping malformed article {article_id}",
                level=logging.WARNING,
                event="article_malformed",
                article_id=article_id,
            )
            continue
        inventory.add(article_from_payload(article_id, payload))
    return inventory


def _log_samples(articles: list[Article], logger: logging.Logger | None) -> None:
    for index, article in enumerate(articles[:_SAMPLE_SIZE], start=1):
        log_event(
            logger,
            f"  Sample {index}: ID={article.id}, Title={article.title}",
            level=logging.DEBUG,
            event="article_sample",
        )


def renew(
    cfg: AppConfig,
    store: InventoryStore,
    tokens: TokenHandler,
    logger: logging.Logger | None = None,
    transport: httpx.BaseTransport | None = None,
    async_transport: httpx.AsyncBaseTransport | None = None,
) -> Library | None:
    """Run one renew cycle.

    Args:
        cfg: Application configuration
        store: Local library store
        tokens: Token handler providing the access token
        logger: Logger for events
        transport: Optional httpx transport for batch actions, used by tests
        async_transport: Optional httpx transport for retrieval, used by tests

    Returns:
        The new Library, or None if Pocket's list could not be retrieved
    """
    credentials = load_credentials(cfg, tokens)
    library = store.load()

    read_articles = list(library.read.articles.values())
    if read_articles:
        log_event(
            logger,
            f"Deleting {len(read_articles)} read articles from Pocket",
            event="renew_delete",
            count=len(read_articles),
        )
        delete(read_articles, cfg.pocket, credentials, logger, transport)
    else:
        log_event(logger, "No read articles to delete", event="renew_delete_skipped")

    log_event(
        logger,
        "Retrieving articles from Pocket (this may take a while for large libraries)...",
        event="renew_fetch",
    )
    payloads = retrieve_unread(cfg.pocket, credentials, logger, async_transport)
    if payloads is None:
        log_event(
            logger,
            "Failed to retrieve articles from Pocket; local library left unchanged",
            level=logging.ERROR,
            event="renew_aborted",
        )
        return None

    unread = build_inventory(payloads, logger)
    log_event(logger, f"Retrieved {len(unread)} articles from Pocket", event="renew_retrieved", count=len(unread))
    _log_samples(list(unread.articles.values()), logger)

    new_library = Library(unread=unread, read=Inventory())
    store.save(new_library)
    log_event(
        logger,
        f"Refreshed library with {len(new_library.unread)} unread articles",
        event="renew_complete",
        count=len(new_library.unread),
    )
    return new_library


def status(store: InventoryStore, logger: logging.Logger | None = None) -> LibraryStatus:
    """Log and return the read/unread counts of the local library."""
    library = store.load()
    result = LibraryStatus(read=len(library.read), unread=len(library.unread))
    log_event(logger, f"You have {result.read} read articles", event="status_read", count=result.read)
    log_event(logger, f"You have {result.unread} unread articles", event="status_unread", count=result.unread)
    return result
