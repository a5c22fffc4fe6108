"""Tests for ApiClient against an in-process httpx transport."""

from __future__ import annotations

import json

import httpx
import pytest

from postsync.models.post import Post
from postsync.models.user import Preference
from postsync.services.client import ApiClient, ClientError

pytestmark = pytest.mark.asyncio

SERVER = "http://chat.test"


def make_client(handler, token="tok"):
    return ApiClient(SERVER, token, transport=httpx.MockTransport(handler))


def post_json(post_id, channel_id="c1", create_at=1):
    return {"id": post_id, "channel_id": channel_id, "user_id": "u1", "create_at": create_at}


async def test_get_posts_builds_url_params_and_auth():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["request"] = request
        return httpx.Response(200, json={"order": ["p1"], "posts": {"p1": post_json("p1")}})

    async with make_client(handler) as client:
        result = await client.get_posts("c1", 2, 30)

    request = seen["request"]
    assert request.method == "GET"
    assert request.url.path == "/api/v4/channels/c1/posts"
    assert request.url.params["page"] == "2"
    assert request.url.params["per_page"] == "30"
    assert request.headers["Authorization"] == "Bearer tok"
    assert result.order == ["p1"]
    assert result.posts["p1"].channel_id == "c1"


async def test_get_posts_before_and_since_params():
    params = []

    def handler(request: httpx.Request) -> httpx.Response:
        params.append(dict(request.url.params))
        return httpx.Response(200, json={"order": [], "posts": {}})

    async with make_client(handler) as client:
        await client.get_posts_before("c1", "p9", 1, 10)
        await client.get_posts_since("c1", 12345)

    assert params[0] == {"before": "p9", "page": "1", "per_page": "10"}
    assert params[1] == {"since": "12345"}


async def test_create_post_sends_body():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(201, json=post_json("p1") | {"message": "hello"})

    async with make_client(handler) as client:
        created = await client.create_post(Post(id="", channel_id="c1", message="hello"))

    assert bodies[0]["message"] == "hello"
    assert bodies[0]["channel_id"] == "c1"
    assert created.id == "p1"


async def test_no_token_sends_no_auth_header():
    headers = []

    def handler(request: httpx.Request) -> httpx.Response:
        headers.append(request.headers)
        return httpx.Response(200, json={"id": "me"})

    async with make_client(handler, token="") as client:
        await client.get_me()

    assert "Authorization" not in headers[0]


async def test_clear_token_drops_auth_header():
    headers = []

    def handler(request: httpx.Request) -> httpx.Response:
        headers.append(request.headers)
        return httpx.Response(200, json={"id": "me"})

    async with make_client(handler) as client:
        client.clear_token()
        await client.get_me()

    assert "Authorization" not in headers[0]


async def test_error_status_raises_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"id": "api.context.session_expired.app_error", "message": "Session expired"})

    async with make_client(handler) as client:
        with pytest.raises(ClientError) as exc_info:
            await client.get_post_thread("p1")

    error = exc_info.value
    assert error.status_code == 401
    assert error.server_error_id == "api.context.session_expired.app_error"
    assert error.message == "Session expired"
    assert error.url == f"{SERVER}/api/v4/posts/p1/thread"


async def test_error_status_with_non_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    async with make_client(handler) as client:
        with pytest.raises(ClientError) as exc_info:
            await client.get_me()

    assert exc_info.value.status_code == 502
    assert exc_info.value.server_error_id == ""


async def test_connection_failure_has_no_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with make_client(handler) as client:
        with pytest.raises(ClientError) as exc_info:
            await client.get_me()

    assert exc_info.value.status_code == 0
    assert exc_info.value.url.endswith("/users/me")


async def test_empty_body_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200)

    async with make_client(handler) as client:
        assert await client.delete_post("p1") is None


async def test_unexpected_shape_raises_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"order": "not-a-list", "posts": []})

    async with make_client(handler) as client:
        with pytest.raises(ClientError, match="Unexpected response shape"):
            await client.get_posts("c1")


async def test_malformed_json_raises_client_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"{not json")

    async with make_client(handler) as client:
        with pytest.raises(ClientError, match="malformed JSON"):
            await client.get_me()


async def test_profiles_and_statuses_by_ids():
    def handler(request: httpx.Request) -> httpx.Response:
        ids = json.loads(request.content)
        if request.url.path.endswith("/users/ids"):
            return httpx.Response(200, json=[{"id": uid, "username": uid.upper()} for uid in ids])
        return httpx.Response(200, json=[{"user_id": uid, "status": "online"} for uid in ids])

    async with make_client(handler) as client:
        profiles = await client.get_profiles_by_ids(["u1", "u2"])
        statuses = await client.get_statuses_by_ids(["u1"])

    assert [p.username for p in profiles] == ["U1", "U2"]
    assert statuses[0].status == "online"


async def test_preferences_endpoints():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, json.loads(request.content)))
        return httpx.Response(200, json={"status": "OK"})

    pref = Preference(user_id="me", category="flagged_post", name="p1", value="true")
    async with make_client(handler) as client:
        await client.save_preferences("me", [pref])
        await client.delete_preferences("me", [pref])

    assert calls[0][:2] == ("PUT", "/api/v4/users/me/preferences")
    assert calls[0][2][0]["name"] == "p1"
    assert calls[1][:2] == ("POST", "/api/v4/users/me/preferences/delete")


async def test_page_size_defaults_and_explicit_zero():
    params = []

    def handler(request: httpx.Request) -> httpx.Response:
        params.append(dict(request.url.params))
        return httpx.Response(200, json={"order": [], "posts": {}})

    async with make_client(handler) as client:
        await client.get_posts("c1")
        await client.get_posts("c1", 0, 0)
        await client.get_posts_after("c1", "p1", 0, 0)

    assert params[0]["per_page"] == "60"
    assert params[1]["per_page"] == "0"
    assert params[2]["per_page"] == "0"
