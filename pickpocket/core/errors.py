"""
Exception hierarchy for Pickpocket.

All errors raised on purpose by the package derive from PickpocketError so
the CLI can turn them into a log line and a non-zero exit code.

An empty page is not an error: the fetcher reports it as a page result with
zero items.
"""

from __future__ import annotations


class PickpocketError(Exception):
    """Base class for all Pickpocket errors."""


class TransportError(PickpocketError):
    """Network-level failure: connection refused, DNS, timeout."""


class ProtocolError(PickpocketError):
    """Remote answered with a non-success status or a body we cannot use.

    Attributes:
        status_code: HTTP status code when a response was received
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageError(PickpocketError):
    """The library file could not be read, parsed or written."""


class AuthorizationError(PickpocketError):
    """Credentials are missing: consumer key, request token or access token."""
