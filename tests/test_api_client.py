import json
from urllib.parse import parse_qs

import httpx
import pytest

from shared.api import ApiClient, ApiData, encode_grant
from shared.protocol import ApiError
from shared.settings import load_api_data


def _client(handler, **data):
    api_data = ApiData(base_url="https://api.example.com", **data)
    return ApiClient(api_data, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_request_parses_json_and_defaults_method():
    seen = []

    def handler(request):
        seen.append(request.method)
        return httpx.Response(200, json={"ok": True})

    async with _client(handler) as client:
        response = await client.request("/v1/contacts")
        posted = await client.request("/v1/contacts", data="name=x")
    assert seen == ["GET", "POST"]
    assert response.data == {"ok": True}
    assert posted.status_code == 200


@pytest.mark.asyncio
async def test_non_json_body_is_returned_as_text():
    async with _client(lambda request: httpx.Response(200, text="plain")) as client:
        response = await client.request("/ping")
    assert response.data == "plain"


@pytest.mark.asyncio
async def test_error_status_raises():
    async with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(ApiError) as info:
            await client.request("/down")
    assert info.value.status_code == 503
    assert "503" in str(info.value)


@pytest.mark.asyncio
async def test_password_grant_obtains_token():
    def handler(request):
        assert request.url.path == "/oauth2/token"
        assert json.loads(request.content) == {
            "grant_type": "password",
            "username": "alice",
            "password": "secret",
            "redirect_uri": None,
        }
        return httpx.Response(200, json={"access_token": "t1", "token_type": "bearer"})

    async with _client(
        handler,
        auth_token_path="/oauth2/token",
        auth_grant_type="password",
        auth_user_name="alice",
        auth_secret="secret",
    ) as client:
        api_data = await client.get_token()
    assert api_data.token == {"access_token": "t1", "token_type": "bearer"}
    assert api_data.authorization == "Bearer t1"


@pytest.mark.asyncio
async def test_refresh_failure_falls_back_to_new_token():
    paths = []

    def handler(request):
        paths.append(request.url.path)
        if request.url.path == "/refresh":
            assert parse_qs(request.content.decode())["refresh_token"] == ["r0"]
            return httpx.Response(400)
        return httpx.Response(200, json={"access_token": "fresh"})

    async with _client(
        handler,
        auth_token_path="/token",
        auth_grant_type="authorization_code",
        auth_secret="code-123",
        refresh_token_path="/refresh",
        token={"access_token": "old", "refresh_token": "r0"},
    ) as client:
        api_data = await client.get_token()
    assert paths == ["/refresh", "/token"]
    assert api_data.token == {"access_token": "fresh"}


@pytest.mark.asyncio
async def test_authorized_request_retries_once_after_refresh():
    calls = []

    def handler(request):
        if request.url.path == "/refresh":
            return httpx.Response(200, json={"access_token": "new", "refresh_token": "r1"})
        calls.append(request.headers.get("Authorization"))
        if request.headers.get("Authorization") == "Bearer old":
            return httpx.Response(401)
        return httpx.Response(200, json={"items": []})

    async with _client(
        handler,
        refresh_token_path="/refresh",
        token={"access_token": "old", "refresh_token": "r0"},
    ) as client:
        response = await client.authorized_request("/v1/items")
    assert calls == ["Bearer old", "Bearer new"]
    assert response.data == {"items": []}


@pytest.mark.asyncio
async def test_authorized_request_gives_up_after_one_retry():
    async with _client(
        lambda request: httpx.Response(401),
        token={"access_token": "old"},
    ) as client:
        with pytest.raises(ApiError) as info:
            await client.authorized_request("/v1/items")
    assert info.value.status_code == 401


def test_encode_grant_formats():
    fields = {"grant_type": "refresh_token", "refresh_token": "abc", "client_id": None}
    assert encode_grant(fields, "application/x-www-form-urlencoded") == "grant_type=refresh_token&refresh_token=abc"
    assert json.loads(encode_grant(fields, "application/json"))["client_id"] is None


def test_load_api_data_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CRM_API_BASE_URL", "https://crm.example.com")
    monkeypatch.setenv("CRM_API_AUTH_GRANT_TYPE", "password")
    api_data = load_api_data("crm", env_path=str(tmp_path / "none.env"))
    assert api_data.base_url == "https://crm.example.com"
    assert api_data.auth_grant_type == "password"
    assert load_api_data("other", env_path=str(tmp_path / "none.env")) is None
