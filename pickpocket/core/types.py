"""
Core data types for Pickpocket.

This module defines the structures persisted in the local library file:
- Article: One saved Pocket item (id, url, title)
- Inventory: A bucket of articles keyed by id
- Library: The two buckets, unread and read
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

UNTITLED = "Untitled"


@dataclass(frozen=True)
class Article:
    """Represents one article saved in Pocket.

    Attributes:
        id: Pocket item id, stable across requests
        url: The URL to open, may be empty when Pocket reports none
        title: Display title, never empty
    """
    id: str
    url: str
    title: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "url": self.url, "title": self.title}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Article":
        return cls(
            id=str(data["id"]),
            url=str(data.get("url") or ""),
            title=str(data.get("title") or UNTITLED),
        )


@dataclass
class Inventory:
    """A bucket of articles keyed by article id."""
    articles: dict[str, Article] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.articles)

    def __contains__(self, article_id: object) -> bool:
        return article_id in self.articles

    def add(self, article: Article) -> None:
        self.articles[article.id] = article

    def remove(self, article_id: str) -> Article | None:
        return self.articles.pop(article_id, None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": {
                article_id: article.to_dict()
                for article_id, article in self.articles.items()
            }
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Inventory":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise TypeError(f"Inventory must be a mapping, got {type(data).__name__}")
        raw_articles = data.get("articles") or {}
        if not isinstance(raw_articles, dict):
            raise TypeError("Inventory 'articles' must be a mapping")
        articles = {}
        for article_id, raw in raw_articles.items():
            if not isinstance(raw, dict):
                raise TypeError(f"Article {article_id!r} must be a mapping")
            article = Article.from_dict({**raw, "id": article_id})
            articles[article.id] = article
        return cls(articles=articles)


@dataclass
class Library:
    """Full local state of the account: unread and read buckets.

    The picker moves articles from unread to read, so an id is never in both
    buckets during normal operation. A renew replaces the whole library.
    """
    unread: Inventory = field(default_factory=Inventory)
    read: Inventory = field(default_factory=Inventory)

    def move_to_read(self, article_id: str) -> Article | None:
        """Move one article from unread to read.

        Args:
            article_id: Id of the article to move

        Returns:
            The moved Article, or None if it was not in unread
        """
        article = self.unread.remove(article_id)
        if article is not None:
            self.read.add(article)
        return article

    def to_dict(self) -> dict[str, Any]:
        return {"read": self.read.to_dict(), "unread": self.unread.to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Library":
        if not isinstance(data, dict):
            raise TypeError(f"Library must be a mapping, got {type(data).__name__}")
        if "read" not in data or "unread" not in data:
            raise KeyError("Library requires both 'read' and 'unread' sections")
        return cls(
            unread=Inventory.from_dict(data["unread"]),
            read=Inventory.from_dict(data["read"]),
        )


def _first_text(*values: Any) -> str | None:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return None


def article_from_payload(article_id: str, payload: dict[str, Any]) -> Article:
    """Build an Article from a Pocket `list` entry.

    Title preference is resolved_title, then given_title, then "Untitled".
    The URL is given_url, then resolved_url, then an empty string.

    Args:
        article_id: Key of the entry in the remote `list` mapping
        payload: The entry itself (detailType=simple)

    Returns:
        Article for the local library
    """
    title = _first_text(payload.get("resolved_title"), payload.get("given_title")) or UNTITLED
    url = _first_text(payload.get("given_url"), payload.get("resolved_url")) or ""
    return Article(id=str(article_id), url=url, title=title)
