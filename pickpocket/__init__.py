"""
Pickpocket - random article picker for a Pocket reading list.

This package mirrors a Pocket account's unread list into a local YAML
library, picks random unread articles to open, and reconciles the local
library back to Pocket (deleting read articles, fetching new ones).

Main entry point is the CLI via the `pickpocket` command.

Example:
    $ pickpocket renew
    $ pickpocket pick -q 3
"""

__all__ = ["__version__", "Article", "Inventory", "Library", "InventoryStore", "Picker"]
__version__ = "0.1.0"

from .core.types import Article, Inventory, Library
from .picker import Picker
from .store import InventoryStore
