"""Tests for paginated retrieval of unread articles."""

from __future__ import annotations

import itertools

import httpx

from pickpocket.api.fetcher import PageResult, merge_pages, retrieve_unread


def test_first_request_carries_credentials_and_filters(cfg, credentials, fake_pocket, make_page):
    fake_pocket.pages = {0: make_page(0, 3)}

    retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    first = fake_pocket.requests[0]
    assert first["consumer_key"] == "test-consumer-key"
    assert first["access_token"] == "test-access-token"
    assert first["state"] == "unread"
    assert first["count"] == "30"
    assert first["offset"] == "0"
    assert first["detailType"] == "simple"


def test_short_first_page_is_the_complete_set(cfg, credentials, fake_pocket, make_page):
    # Page 1 would add articles, but a short page 0 must end retrieval.
    fake_pocket.pages = {0: make_page(0, 5), 30: make_page(100, 30)}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    assert set(items) == {str(i) for i in range(5)}
    assert fake_pocket.retrieve_offsets == [0]


def test_full_first_page_then_empty_page(cfg, credentials, fake_pocket, make_page):
    fake_pocket.pages = {0: make_page(0, 30)}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    assert len(items) == 30
    assert set(items) == {str(i) for i in range(30)}
    # One batch of concurrent requests after the first page.
    assert fake_pocket.retrieve_offsets[0] == 0
    assert sorted(fake_pocket.retrieve_offsets[1:]) == [30, 60, 90, 120, 150]


def test_empty_account_returns_empty_mapping(cfg, credentials, fake_pocket):
    fake_pocket.pages = {0: {"status": 2, "list": []}}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    assert items == {}


def test_first_page_http_error_returns_none(cfg, credentials, fake_pocket):
    fake_pocket.pages = {0: httpx.Response(503, text="unavailable")}

    assert retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport()) is None


def test_first_page_without_list_returns_none(cfg, credentials, fake_pocket):
    fake_pocket.pages = {0: {"status": 1, "error": None}}

    assert retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport()) is None


def test_first_page_invalid_json_returns_none(cfg, credentials, fake_pocket):
    fake_pocket.pages = {0: httpx.Response(200, text="<html>oops</html>")}

    assert retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport()) is None


def test_transport_error_returns_none(cfg, credentials):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    assert retrieve_unread(cfg.pocket, credentials, transport=httpx.MockTransport(handler)) is None


def test_batches_stop_after_batch_with_empty_page(cfg, credentials, fake_pocket, make_page):
    cfg.pocket.page_size = 2
    # Offsets 0..10 are full; offset 12 and later are empty.
    fake_pocket.pages = {offset: make_page(offset, 2) for offset in range(0, 12, 2)}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    assert len(items) == 12
    offsets = fake_pocket.retrieve_offsets
    assert offsets[0] == 0
    assert sorted(offsets[1:6]) == [2, 4, 6, 8, 10]
    assert sorted(offsets[6:]) == [12, 14, 16, 18, 20]
    assert len(offsets) == 11


def test_failed_page_stops_pagination_but_keeps_batch_results(cfg, credentials, fake_pocket, make_page):
    cfg.pocket.page_size = 2
    fake_pocket.pages = {offset: make_page(offset, 2) for offset in range(0, 40, 2)}
    fake_pocket.pages[4] = httpx.Response(500, text="boom")

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    # Page 0 plus the non-failed pages of the first batch (2, 6, 8, 10).
    assert set(items) == {str(i) for i in (0, 1, 2, 3, 6, 7, 8, 9, 10, 11)}
    assert len(fake_pocket.retrieve_offsets) == 6


def test_offset_ceiling_limits_pages(cfg, credentials, fake_pocket, make_page):
    cfg.pocket.page_size = 2
    cfg.pocket.max_pages = 50
    fake_pocket.pages = {offset: make_page(offset, 2) for offset in range(0, 400, 2)}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    # First page plus pages at offsets 2..100.
    assert len(fake_pocket.retrieve_offsets) == 51
    assert max(fake_pocket.retrieve_offsets) == 100
    assert len(items) == 102


def test_concurrency_setting_controls_batch_size(cfg, credentials, fake_pocket, make_page):
    cfg.pocket.page_size = 2
    cfg.pocket.max_concurrent_requests = 3
    fake_pocket.pages = {offset: make_page(offset, 2) for offset in range(0, 8, 2)}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    assert len(items) == 8
    # 0, then [2, 4, 6], then [8, 10, 12] where 8 is empty.
    assert len(fake_pocket.retrieve_offsets) == 7


def test_duplicate_ids_across_pages_are_merged(cfg, credentials, fake_pocket, make_page):
    cfg.pocket.page_size = 2
    fake_pocket.pages = {0: make_page(0, 2), 2: make_page(1, 2)}

    items = retrieve_unread(cfg.pocket, credentials, transport=fake_pocket.transport())

    assert set(items) == {"0", "1", "2"}


def test_merge_is_independent_of_page_order():
    pages = [
        PageResult(offset=2, items={"a": {}, "b": {}}),
        PageResult(offset=4, items={"c": {}}),
        PageResult(offset=6, items={}),
        PageResult(offset=8, items=None, error="HTTP 500"),
        PageResult(offset=10, items={"d": {}, "a": {}}),
    ]

    results = set()
    for ordering in itertools.permutations(pages):
        merged: dict = {}
        stop = merge_pages(merged, ordering)
        assert stop is True
        results.add(frozenset(merged))

    assert results == {frozenset({"a", "b", "c", "d"})}


def test_merge_continues_when_every_page_is_full():
    merged = {"x": {}}
    stop = merge_pages(merged, [PageResult(offset=2, items={"y": {}})])

    assert stop is False
    assert set(merged) == {"x", "y"}
