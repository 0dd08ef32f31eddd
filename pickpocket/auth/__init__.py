"""OAuth handshake with Pocket and local token storage."""

from .oauth import authorize, request_authorization
from .tokens import TokenHandler

__all__ = ["TokenHandler", "authorize", "request_authorization"]
