"""Tests for the backend REST client and the table-backed stores."""
from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

import httpx
import pytest

from housers.clients.backend import BackendClient, eq, in_, usernames_filter
from housers.clients.stores import BackendNotificationStore, BackendProfileDirectory
from housers.errors import NetworkError, NotFoundError

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, *, access_token: str | None = None) -> BackendClient:
    return BackendClient(
        base_url="https://backend.example.test/",
        api_key="anon-key",
        access_token=access_token,
        transport=httpx.MockTransport(handler),
    )


def test_filter_builders() -> None:
    assert eq(True) == "eq.true"
    assert eq(5) == "eq.5"
    assert in_(["a", 'b"c']) == 'in.("a","b\\"c")'
    assert usernames_filter(["solo"]) == {"username": "eq.solo"}
    assert usernames_filter(["a", "b"]) == {"username": 'in.("a","b")'}


@pytest.mark.asyncio
async def test_select_sends_query_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "1"}, "junk"])

    async with _client(handler, access_token="user-token") as client:
        rows = await client.select("profiles", filters={"username": eq("alice")}, order="created_at.desc", limit=5)

    request = seen[0]
    assert rows == [{"id": "1"}]
    assert request.url.path == "/rest/v1/profiles"
    assert request.url.params["select"] == "*"
    assert request.url.params["username"] == "eq.alice"
    assert request.url.params["order"] == "created_at.desc"
    assert request.url.params["limit"] == "5"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer user-token"


@pytest.mark.asyncio
async def test_update_uses_patch_with_minimal_return() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    async with _client(handler) as client:
        await client.update("notifications", {"is_read": True}, filters={"id": eq("n1")})
        with pytest.raises(ValueError):
            await client.update("notifications", {"is_read": True}, filters={})

    assert len(seen) == 1
    assert seen[0].method == "PATCH"
    assert seen[0].headers["Prefer"] == "return=minimal"
    assert seen[0].headers["Authorization"] == "Bearer anon-key"
    assert json.loads(seen[0].content) == {"is_read": True}


@pytest.mark.asyncio
async def test_status_errors_become_network_errors() -> None:
    async with _client(lambda request: httpx.Response(500, json={"message": "boom"})) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.select("profiles")
    assert excinfo.value.status_code == 500


@pytest.mark.asyncio
async def test_transport_errors_become_network_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.select("profiles")
    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_current_user_id() -> None:
    user_id = uuid4()

    async with _client(lambda request: httpx.Response(200, json={"id": str(user_id)})) as client:
        assert await client.current_user_id() == user_id

    async with _client(lambda request: httpx.Response(200, json={"email": "x@y.z"})) as client:
        with pytest.raises(NetworkError):
            await client.current_user_id()


@pytest.mark.asyncio
async def test_profile_directory_skips_malformed_rows() -> None:
    alice = uuid4()
    rows = [{"id": str(alice), "username": "alice", "extra": 1}, {"id": "not-a-uuid", "username": "bob"}]

    async with _client(lambda request: httpx.Response(200, json=rows)) as client:
        profiles = await BackendProfileDirectory(client).find_by_usernames(["alice", "bob"])

    assert [(profile.id, profile.username) for profile in profiles] == [(alice, "alice")]


@pytest.mark.asyncio
async def test_profile_directory_short_circuits_empty_lookup() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async with _client(handler) as client:
        assert await BackendProfileDirectory(client).find_by_usernames([]) == []


@pytest.mark.asyncio
async def test_notification_store_queries() -> None:
    user_id = uuid4()
    seen: list[httpx.Request] = []
    row = {
        "id": str(uuid4()),
        "user_id": str(user_id),
        "type": "comment",
        "title": "New comment",
        "message": "nice place",
        "is_read": False,
        "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc).isoformat(),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.method == "GET":
            return httpx.Response(200, json=[row])
        return httpx.Response(204)

    async with _client(handler) as client:
        store = BackendNotificationStore(client)
        items = await store.fetch_recent(user_id, limit=50)
        await store.mark_all_read(user_id)
        unread = await store.count_unread(user_id)

    assert items[0].kind == "comment"
    assert unread == 1
    fetch, mark_all, count = seen
    assert fetch.url.params["order"] == "created_at.desc"
    assert fetch.url.params["limit"] == "50"
    assert fetch.url.params["user_id"] == f"eq.{user_id}"
    assert mark_all.method == "PATCH"
    assert mark_all.url.params["is_read"] == "eq.false"
    assert count.url.params["select"] == "id"


@pytest.mark.asyncio
async def test_get_profile_treats_missing_row_as_none() -> None:
    async with _client(lambda request: httpx.Response(200, json=[])) as client:
        with pytest.raises(NotFoundError):
            await client.select_one("profiles", filters={"id": eq("missing")})
        assert await BackendProfileDirectory(client).get_profile(uuid4()) is None

    user_id = uuid4()
    row = {"id": str(user_id), "username": "houser", "market": "Boise, ID"}
    async with _client(lambda request: httpx.Response(200, json=[row])) as client:
        profile = await BackendProfileDirectory(client).get_profile(user_id)
    assert profile is not None and profile.market == "Boise, ID"


@pytest.mark.asyncio
async def test_non_json_body_becomes_network_error() -> None:
    def gateway_page(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    async with _client(gateway_page) as client:
        with pytest.raises(NetworkError) as excinfo:
            await client.select("profiles")
        assert excinfo.value.status_code == 200

        with pytest.raises(NetworkError):
            await client.current_user_id()

        with pytest.raises(NetworkError):
            await BackendNotificationStore(client).fetch_recent(uuid4(), limit=50)
