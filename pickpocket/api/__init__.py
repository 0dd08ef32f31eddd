"""Pocket API access: paginated retrieval and batch actions."""

from .actions import ACTION_ARCHIVE, ACTION_DELETE, ActionStats, archive, delete, send_actions
from .client import Credentials
from .fetcher import PageResult, retrieve_unread, retrieve_unread_async

__all__ = [
    "ACTION_ARCHIVE",
    "ACTION_DELETE",
    "ActionStats",
    "Credentials",
    "PageResult",
    "archive",
    "delete",
    "retrieve_unread",
    "retrieve_unread_async",
    "send_actions",
]
