"""Shared fixtures: a fake Pocket service and an isolated home folder."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from urllib.parse import parse_qs

import httpx
import pytest

from pickpocket.api.client import Credentials
from pickpocket.auth.tokens import TokenHandler
from pickpocket.config import AppConfig
from pickpocket.store import InventoryStore


class FakePocket:
    """In-memory stand-in for the Pocket retrieve and send endpoints.

    `pages` maps an offset to the JSON body returned for it, or to an
    httpx.Response for custom failures. Offsets not listed return an empty
    list.
    """

    def __init__(self, pages: dict[int, object] | None = None):
        self.pages = pages or {}
        self.requests: list[dict[str, str]] = []
        self.sent_actions: list[list[dict[str, str]]] = []
        self.send_status: list[int] = []

    @staticmethod
    def _form(request: httpx.Request) -> dict[str, str]:
        parsed = parse_qs(request.content.decode("utf-8"))
        return {key: values[0] for key, values in parsed.items()}

    def handler(self, request: httpx.Request) -> httpx.Response:
        form = self._form(request)
        self.requests.append({"path": request.url.path, **form})
        if request.url.path.endswith("/get"):
            body = self.pages.get(int(form["offset"]), {"status": 1, "list": []})
            if isinstance(body, httpx.Response):
                return body
            return httpx.Response(200, json=body)
        if request.url.path.endswith("/send"):
            self.sent_actions.append(json.loads(form["actions"]))
            code = self.send_status.pop(0) if self.send_status else 200
            return httpx.Response(code, json={"status": 1 if code == 200 else 0})
        return httpx.Response(404)

    @property
    def retrieve_offsets(self) -> list[int]:
        return [int(r["offset"]) for r in self.requests if r["path"].endswith("/get")]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_page(start: int, count: int) -> dict:
    return {
        "status": 1,
        "list": {
            str(i): {
                "item_id": str(i),
                "given_url": f"https://example.com/{i}",
                "given_title": f"Given {i}",
                "resolved_title": f"Article {i}",
            }
            for i in range(start, start + count)
        },
    }


@pytest.fixture
def cfg(tmp_path: Path) -> AppConfig:
    cfg = AppConfig()
    cfg.pocket.consumer_key = "test-consumer-key"
    cfg.storage.home_folder = str(tmp_path)
    return cfg


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(consumer_key="test-consumer-key", access_token="test-access-token")


@pytest.fixture
def store(tmp_path: Path) -> InventoryStore:
    return InventoryStore(tmp_path / "library.yml")


@pytest.fixture
def tokens(tmp_path: Path) -> TokenHandler:
    handler = TokenHandler(tmp_path / "oauth_token", tmp_path / "access_token")
    handler.save_access_token("test-access-token")
    return handler


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("pickpocket_tests")


@pytest.fixture
def fake_pocket() -> FakePocket:
    return FakePocket()


@pytest.fixture(name="make_page")
def make_page_fixture():
    return make_page
