"""Random selection of unread articles."""

from __future__ import annotations

import logging
import random
import webbrowser
from typing import Callable, Protocol, Sequence

from .store import InventoryStore
from .utils.logging import log_event


class RandomSource(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


class Picker:
    """Moves random unread articles to read and opens them.

    The library is reloaded from disk for every pick, so each iteration sees
    what the previous one saved.
    """

    def __init__(
        self,
        store: InventoryStore,
        logger: logging.Logger | None = None,
        rng: RandomSource | None = None,
        opener: Callable[[str], bool] | None = None,
    ):
        self._store = store
        self._logger = logger
        self._rng = rng or random.SystemRandom()
        self._opener = opener or webbrowser.open

    def pick(self, quantity: int = 1) -> int:
        """Pick up to `quantity` random unread articles.

        Args:
            quantity: Number of articles to open

        Returns:
            Number of articles successfully opened
        """
        opened = 0
        for index in range(quantity):
            library = self._store.load()
            if not library.unread.articles:
                log_event(self._logger, "You have read all articles!", event="pick_exhausted")
                break

            # Sorted so a seeded random source always yields the same pick.
            article_id = self._rng.choice(sorted(library.unread.articles))
            article = library.move_to_read(article_id)
            self._store.save(library)

            log_event(
                self._logger,
                f"Opening article {index + 1}/{quantity}: {article.title}",
                event="pick_open",
                article_id=article.id,
            )
            if self._open(article.url):
                opened += 1

        if opened > 0:
            log_event(self._logger, f"Opened {opened} article(s)", event="pick_complete", opened=opened)
        return opened

    def _open(self, url: str) -> bool:
        try:
            if self._opener(url):
                return True
            error = "no browser available"
        except webbrowser.Error as exc:
            error = str(exc)
        log_event(self._logger, f"Failed to open article: {error}", level=logging.WARNING, event="open_failed")
        log_event(self._logger, f"URL: {url}", level=logging.WARNING, event="open_failed_url", url=url)
        return False
