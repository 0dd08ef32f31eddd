"""
Batch actions (archive, delete) on Pocket items.

Pocket's send endpoint accepts a bounded number of actions per request, so
articles are split into chunks sent one after another. A failed chunk is
logged and skipped: nothing is retried or rolled back, and no error reaches
the caller.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import httpx

from ..config import PocketConfig
from ..core.errors import PickpocketError, ProtocolError
from ..core.types import Article
from ..utils.logging import log_event
from .client import Credentials, create_client, decode_json, post_form

ACTION_ARCHIVE = "archive"
ACTION_DELETE = "delete"

_PAST_TENSE = {ACTION_ARCHIVE: "archived", ACTION_DELETE: "deleted"}


@dataclass
class ActionStats:
    """Outcome of a send_actions call.

    Attributes:
        action: Action that was sent
        total: Number of articles submitted
        chunks: Number of requests issued
        succeeded: Chunks accepted by Pocket
        failed: Chunks that failed
        sent: Articles in accepted chunks
    """
    action: str
    total: int = 0
    chunks: int = 0
    succeeded: int = 0
    failed: int = 0
    sent: int = 0


def chunk_articles(articles: Sequence[Article], size: int) -> list[list[Article]]:
    size = max(1, int(size))
    return [list(articles[start:start + size]) for start in range(0, len(articles), size)]


def build_actions(articles: Iterable[Article], action: str) -> str:
    return json.dumps([{"action": action, "item_id": article.id} for article in articles])


def send_actions(
    articles: Iterable[Article],
    action: str,
    cfg: PocketConfig,
    credentials: Credentials,
    logger: logging.Logger | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ActionStats:
    """Apply one action to every article, one request per chunk.

    Args:
        articles: Articles to act on
        action: ACTION_ARCHIVE or ACTION_DELETE
        cfg: Pocket configuration (send endpoint, chunk size)
        credentials: Consumer key and access token
        logger: Logger for events
        transport: Optional httpx transport, used by tests

    Returns:
        ActionStats describing what was sent

    Raises:
        ValueError: Unsupported action
    """
    if action not in _PAST_TENSE:
        raise ValueError(f"Unsupported action: {action}")

    articles = list(articles)
    stats = ActionStats(action=action, total=len(articles))
    if not articles:
        return stats

    chunks = chunk_articles(articles, cfg.action_chunk_size)
    with create_client(cfg, transport) as client:
        for index, chunk in enumerate(chunks, start=1):
            stats.chunks += 1
            params = {**credentials.as_params(), "actions": build_actions(chunk, action)}
            try:
                data = decode_json(post_form(client, cfg.send_url, params))
                if data.get("status", 1) != 1:
                    raise ProtocolError(f"Pocket rejected the actions (status {data.get('status')})")
            except PickpocketError as exc:
                stats.failed += 1
                log_event(
                    logger,
                    f"Failed to {action} chunk {index}/{len(chunks)}: {exc}",
                    level=logging.ERROR,
                    event="action_failed",
                    action=action,
                    chunk=index,
                    count=len(chunk),
                    error=str(exc),
                )
                continue

            stats.succeeded += 1
            stats.sent += len(chunk)
            log_event(
                logger,
                f"Successfully {_PAST_TENSE[action]} {len(chunk)} articles (chunk {index}/{len(chunks)})",
                event="action_sent",
                action=action,
                chunk=index,
                count=len(chunk),
            )
    return stats


def archive(articles, cfg, credentials, logger=None, transport=None) -> ActionStats:
    return send_actions(articles, ACTION_ARCHIVE, cfg, credentials, logger, transport)


def delete(articles, cfg, credentials, logger=None, transport=None) -> ActionStats:
    return send_actions(articles, ACTION_DELETE, cfg, credentials, logger, transport)
