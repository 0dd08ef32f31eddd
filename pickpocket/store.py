"""Local library persistence.

The library lives in a single YAML file. Every component loads the whole
file, works on the in-memory copy and writes the whole file back; there is
no incremental update and no file locking, so two commands running at the
same time can lose each other's changes.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .core.errors import StorageError
from .core.types import Library
from .utils.logging import log_event


def ensure_home_folder(path: Path, logger: logging.Logger | None = None) -> bool:
    """Create the home folder (and parents) if it doesn't exist.

    Failures are logged rather than raised; the first load or save will
    report a StorageError if the folder is really unusable.

    Returns:
        True if the folder exists afterwards
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        log_event(
            logger,
            f"Could not create home folder. Motive: {exc}",
            level=logging.ERROR,
            event="home_folder_failed",
            path=str(path),
        )
        return False
    return True


class InventoryStore:
    """Reads and writes the Library as one YAML document.

    Attributes:
        path: Location of the library file
    """

    def __init__(self, path: Path, logger: logging.Logger | None = None):
        self.path = path
        self._logger = logger

    def load(self) -> Library:
        """Load the library, creating an empty one on first use.

        Raises:
            StorageError: The file exists but cannot be read or parsed
        """
        if not self.path.exists():
            log_event(
                self._logger,
                "Library file not found. Creating...",
                event="library_created",
                path=str(self.path),
            )
            self.save(Library())

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not read library file {self.path}: {exc}") from exc

        try:
            raw = yaml.safe_load(content)
            return Library.from_dict(raw)
        except (yaml.YAMLError, KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Library file {self.path} is corrupt: {exc}") from exc

    def save(self, library: Library) -> None:
        """Overwrite the library file with the given library."""
        content = yaml.safe_dump(library.to_dict(), sort_keys=True, allow_unicode=True)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Could not write library file {self.path}: {exc}") from exc
