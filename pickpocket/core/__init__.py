"""Core data types and errors shared by every Pickpocket component."""

from .errors import (
    AuthorizationError,
    PickpocketError,
    ProtocolError,
    StorageError,
    TransportError,
)
from .types import Article, Inventory, Library, article_from_payload

__all__ = [
    "Article",
    "Inventory",
    "Library",
    "article_from_payload",
    "PickpocketError",
    "TransportError",
    "ProtocolError",
    "StorageError",
    "AuthorizationError",
]
