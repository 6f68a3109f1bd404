from __future__ import annotations

from datetime import datetime, timezone
import json

import httpx
import pytest

from lp_tracker.infrastructure.clients.subgraph_client import (
    SubgraphFeedClient,
    SubgraphFeedClientSettings,
    SubgraphQueryError,
)
from lp_tracker.infrastructure.clients.subgraph_schema import get_schema_adapter


GRAPH_URL = "https://graph.example/subgraphs/name/positions"


def _make_client(*, version: str = "v4", max_retries: int = 1, url: str = GRAPH_URL) -> SubgraphFeedClient:
    return SubgraphFeedClient(
        SubgraphFeedClientSettings(
            graph_api_url=url,
            timeout_seconds=5,
            max_retries=max_retries,
            page_size=100,
        ),
        schema=get_schema_adapter(version),
    )


def _install_transport(monkeypatch: pytest.MonkeyPatch, handler) -> list[dict]:
    requests: list[dict] = []
    real_client = httpx.Client

    def recording_handler(request: httpx.Request) -> httpx.Response:
        requests.append(json.loads(request.content))
        return handler(request)

    def client_factory(*args, **kwargs):
        return real_client(*args, transport=httpx.MockTransport(recording_handler), **kwargs)

    monkeypatch.setattr(
        "lp_tracker.infrastructure.clients.subgraph_client.httpx.Client",
        client_factory,
    )
    monkeypatch.setattr(
        "lp_tracker.infrastructure.clients.subgraph_client.time.sleep",
        lambda _seconds: None,
    )
    return requests


def test_fetch_recent_positions_sends_watermark_and_reads_event_container(monkeypatch: pytest.MonkeyPatch):
    requests = _install_transport(
        monkeypatch,
        lambda _request: httpx.Response(200, json={"data": {"modifyLiquidities": [{"id": "a"}, {"id": "b"}]}}),
    )
    client = _make_client()

    rows = client.fetch_recent_positions(since=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert [row["id"] for row in rows] == ["a", "b"]
    assert requests[0]["variables"] == {"timestamp": "1767225600", "first": 100}
    assert "modifyLiquidities(" in requests[0]["query"]


def test_fetch_recent_positions_reads_legacy_container(monkeypatch: pytest.MonkeyPatch):
    _install_transport(
        monkeypatch,
        lambda _request: httpx.Response(200, json={"data": {"positions": [{"id": "1"}]}}),
    )
    client = _make_client(version="v3")

    rows = client.fetch_recent_positions(since=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert rows == [{"id": "1"}]


def test_lookups_lowercase_addresses(monkeypatch: pytest.MonkeyPatch):
    requests = _install_transport(
        monkeypatch,
        lambda _request: httpx.Response(200, json={"data": {"modifyLiquidities": [], "swaps": []}}),
    )
    client = _make_client()

    client.fetch_positions_by_owner(owner="0xABC")
    client.fetch_positions_by_pool(pool_id="0xDEF")
    client.fetch_recent_swaps(pool_id="0xDEF", since=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert requests[0]["variables"]["owner"] == "0xabc"
    assert requests[1]["variables"]["poolId"] == "0xdef"
    assert requests[2]["variables"] == {"poolId": "0xdef", "timestamp": "1767225600", "first": 100}


def test_graphql_errors_are_fatal(monkeypatch: pytest.MonkeyPatch):
    _install_transport(
        monkeypatch,
        lambda _request: httpx.Response(200, json={"errors": [{"message": "bad field"}, {"message": "oops"}]}),
    )
    client = _make_client()

    with pytest.raises(SubgraphQueryError) as exc_info:
        client.fetch_recent_positions(since=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert exc_info.value.query_name == "recent_positions"
    assert "bad field | oops" in str(exc_info.value)


def test_non_success_status_is_fatal(monkeypatch: pytest.MonkeyPatch):
    _install_transport(monkeypatch, lambda _request: httpx.Response(503, text="unavailable"))
    client = _make_client()

    with pytest.raises(SubgraphQueryError, match="recent_swaps"):
        client.fetch_recent_swaps(pool_id="0xpool", since=datetime(2026, 1, 1, tzinfo=timezone.utc))


def test_missing_data_is_fatal(monkeypatch: pytest.MonkeyPatch):
    _install_transport(monkeypatch, lambda _request: httpx.Response(200, json={"data": None}))
    client = _make_client()

    with pytest.raises(SubgraphQueryError, match="No data"):
        client.fetch_positions_by_owner(owner="0xabc")


def test_container_that_is_not_a_list_is_fatal(monkeypatch: pytest.MonkeyPatch):
    _install_transport(
        monkeypatch,
        lambda _request: httpx.Response(200, json={"data": {"modifyLiquidities": {"id": "a"}}}),
    )
    client = _make_client()

    with pytest.raises(SubgraphQueryError, match="not a list"):
        client.fetch_positions_by_pool(pool_id="0xpool")


def test_transient_failure_is_retried(monkeypatch: pytest.MonkeyPatch):
    responses = [
        httpx.Response(502, text="bad gateway"),
        httpx.Response(200, json={"data": {"modifyLiquidities": [{"id": "a"}]}}),
    ]
    requests = _install_transport(monkeypatch, lambda _request: responses.pop(0))
    client = _make_client(max_retries=3)

    rows = client.fetch_recent_positions(since=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert rows == [{"id": "a"}]
    assert len(requests) == 2


def test_missing_url_is_fatal_without_request(monkeypatch: pytest.MonkeyPatch):
    requests = _install_transport(monkeypatch, lambda _request: httpx.Response(200, json={"data": {}}))
    client = _make_client(url="")

    with pytest.raises(SubgraphQueryError, match="GRAPH_API_URL"):
        client.fetch_recent_positions(since=datetime(2026, 1, 1, tzinfo=timezone.utc))

    assert requests == []
