import json

import httpx
import pytest

from storefront.core.config import Settings
from storefront.services.supabase_client import (
    BackendError,
    SupabaseClient,
    build_supabase_client,
)

BASE_URL = "https://project.supabase.co"


def make_client(handler):
    return SupabaseClient(BASE_URL + "/", "anon-key", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_user_sends_keys_and_parses_user():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers["apikey"]
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"id": "u1", "email": "a@example.com"})

    client = make_client(handler)
    user = await client.get_user("user-token")
    await client.close()

    assert user.id == "u1"
    assert user.email == "a@example.com"
    assert seen == {
        "url": f"{BASE_URL}/auth/v1/user",
        "apikey": "anon-key",
        "auth": "Bearer user-token",
    }


@pytest.mark.asyncio
async def test_get_user_with_rejected_token_is_none():
    client = make_client(lambda request: httpx.Response(401, json={"msg": "invalid JWT"}))

    assert await client.get_user("expired") is None


@pytest.mark.asyncio
async def test_get_user_server_error_raises():
    client = make_client(lambda request: httpx.Response(500, text="down"))

    with pytest.raises(BackendError) as exc_info:
        await client.get_user("tok")

    assert exc_info.value.status_code == 500
    assert exc_info.value.message == "down"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"aud": "authenticated"}),
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json=["u1"]),
    ],
)
async def test_get_user_malformed_body_raises(response):
    client = make_client(lambda request: response)

    with pytest.raises(BackendError, match="Malformed auth response") as exc_info:
        await client.get_user("tok")

    assert exc_info.value.status_code == 200


@pytest.mark.asyncio
async def test_select_malformed_body_raises():
    client = make_client(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(BackendError, match="Malformed response from orders"):
        await client.select("orders")


@pytest.mark.asyncio
async def test_insert_posts_row_with_minimal_return():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["prefer"] = request.headers["Prefer"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(201)

    client = make_client(handler)
    await client.insert("orders", {"id": "ORD-1", "total_amount": 5.0}, access_token="tok")

    assert seen == {
        "method": "POST",
        "path": "/rest/v1/orders",
        "prefer": "return=minimal",
        "body": {"id": "ORD-1", "total_amount": 5.0},
    }


@pytest.mark.asyncio
async def test_select_builds_equality_filters_and_order():
    seen = {}

    def handler(request):
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=[{"id": "ORD-1"}])

    client = make_client(handler)
    rows = await client.select("orders", {"user_id": "u1"}, order="created_at.desc")

    assert rows == [{"id": "ORD-1"}]
    assert seen["params"] == {
        "select": "*",
        "user_id": "eq.u1",
        "order": "created_at.desc",
    }


@pytest.mark.asyncio
async def test_select_one_returns_first_row_or_none():
    rows = [[{"id": "u1", "first_name": "Ada"}], []]
    client = make_client(lambda request: httpx.Response(200, json=rows.pop(0)))

    assert (await client.select_one("profiles", {"id": "u1"}))["first_name"] == "Ada"
    assert await client.select_one("profiles", {"id": "u1"}) is None


@pytest.mark.asyncio
async def test_update_patches_filtered_rows():
    seen = {}

    def handler(request):
        seen["method"] = request.method
        seen["params"] = dict(request.url.params)
        seen["body"] = json.loads(request.content)
        return httpx.Response(204)

    client = make_client(handler)
    await client.update("profiles", {"phone": "555"}, {"id": "u1"}, access_token="tok")

    assert seen == {
        "method": "PATCH",
        "params": {"id": "eq.u1"},
        "body": {"phone": "555"},
    }


@pytest.mark.asyncio
async def test_error_message_taken_from_json_body():
    client = make_client(
        lambda request: httpx.Response(409, json={"message": "duplicate key value"})
    )

    with pytest.raises(BackendError, match="duplicate key value"):
        await client.insert("orders", {"id": "ORD-1"})


@pytest.mark.asyncio
async def test_transport_failure_becomes_backend_error():
    def handler(request):
        raise httpx.ConnectError("connection refused")

    client = make_client(handler)

    with pytest.raises(BackendError) as exc_info:
        await client.select("orders")

    assert exc_info.value.status_code is None


def test_build_client_requires_url_and_key():
    assert build_supabase_client(Settings(supabase_url=None, supabase_anon_key=None)) is None
    assert build_supabase_client(Settings(supabase_url=BASE_URL, supabase_anon_key="")) is None

    client = build_supabase_client(Settings(supabase_url=BASE_URL, supabase_anon_key="anon"))
    assert isinstance(client, SupabaseClient)
