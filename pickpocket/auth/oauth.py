"""
Two-step OAuth handshake with Pocket.

1. request_authorization(): obtain a request token, open Pocket's consent
   page in the browser and store the token.
2. authorize(): once the user has granted access, exchange the request
   token for an access token and store it.
"""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable
from urllib.parse import parse_qsl, urlencode

import httpx

from ..config import PocketConfig, get_consumer_key
from ..core.errors import ProtocolError
from ..utils.logging import log_event
from ..api.client import check_status, create_client, post_form
from .tokens import TokenHandler


def _response_value(resp: httpx.Response, key: str) -> str:
    """Read `key` from a form-encoded or JSON response body."""
    check_status(resp)
    content_type = resp.headers.get("content-type", "")
    if "json" in content_type:
        try:
            value = resp.json().get(key)
        except (ValueError, AttributeError) as exc:
            raise ProtocolError(f"Invalid response format from Pocket: {exc}") from exc
    else:
        value = dict(parse_qsl(resp.text)).get(key)
    if not value:
        raise ProtocolError(f"Invalid response format from Pocket: missing '{key}'")
    return value


def build_user_authorize_url(cfg: PocketConfig, request_token: str) -> str:
    query = urlencode({"request_token": request_token, "redirect_uri": cfg.redirect_uri})
    return f"{cfg.user_authorize_url}?{query}"


def request_authorization(
    cfg: PocketConfig,
    tokens: TokenHandler,
    logger: logging.Logger | None = None,
    opener: Callable[[str], bool] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """First authorization step: ask Pocket to allow this application.

    Returns:
        The request token, also saved through `tokens`
    """
    params = {"consumer_key": get_consumer_key(cfg), "redirect_uri": cfg.redirect_uri}
    with create_client(cfg, transport) as client:
        resp = post_form(client, cfg.oauth_request_url, params)
    request_token = _response_value(resp, "code")

    url = build_user_authorize_url(cfg, request_token)
    log_event(logger, "Opening Pocket authorization page", event="oauth_open", url=url)
    if not (opener or webbrowser.open)(url):
        log_event(
            logger,
            f"Could not open a browser. Visit {url} to authorize Pickpocket.",
            level=logging.WARNING,
            event="oauth_open_failed",
        )

    tokens.save_oauth_token(request_token)
    log_event(logger, "Request token saved. Run 'pickpocket authorize' once access is granted.", event="oauth_saved")
    return request_token


def authorize(
    cfg: PocketConfig,
    tokens: TokenHandler,
    logger: logging.Logger | None = None,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Second authorization step: exchange the request token for an access token.

    Returns:
        The access token, also saved through `tokens`
    """
    params = {"consumer_key": get_consumer_key(cfg), "code": tokens.read_oauth_token()}
    with create_client(cfg, transport) as client:
        resp = post_form(client, cfg.oauth_authorize_url, params)
    access_token = _response_value(resp, "access_token")

    tokens.save_access_token(access_token)
    log_event(logger, "Pickpocket is authorized to access your library", event="authorized")
    return access_token
