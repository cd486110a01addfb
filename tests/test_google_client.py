"""Tests for the Google client -- code exchange, userinfo, consent URL."""

from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.clients import google_client
from app.clients.google_client import (
    GOOGLE_TOKEN_URL,
    GOOGLE_USERINFO_URL,
    GoogleUser,
    build_authorization_url,
    exchange_code_for_token,
    get_google_user,
)
from app.errors import ProfileFetchError, TokenExchangeError, UnverifiedEmailError
from tests.conftest import MOCK_USERINFO


def _response(method: str, url: str, status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request(method, url), **kwargs)


@pytest.fixture
def mock_client():
    client = AsyncMock()
    with patch("app.clients.google_client._get_client", return_value=client):
        yield client


# ---------- exchange_code_for_token ----------


@pytest.mark.asyncio
async def test_exchange_returns_access_token(mock_client):
    mock_client.post.return_value = _response(
        "POST", GOOGLE_TOKEN_URL, json={"access_token": "tok", "expires_in": 3599},
    )

    token = await exchange_code_for_token("valid123", "cid", "csecret", "http://cb")

    assert token == "tok"
    mock_client.post.assert_called_once()
    args, kwargs = mock_client.post.call_args
    assert args[0] == GOOGLE_TOKEN_URL
    assert kwargs["data"] == {
        "code": "valid123",
        "client_id": "cid",
        "client_secret": "csecret",
        "redirect_uri": "http://cb",
        "grant_type": "authorization_code",
    }


@pytest.mark.asyncio
async def test_exchange_empty_body_raises(mock_client):
    mock_client.post.return_value = _response("POST", GOOGLE_TOKEN_URL, json={})

    with pytest.raises(TokenExchangeError):
        await exchange_code_for_token("valid123", "cid", "csecret", "http://cb")


@pytest.mark.asyncio
async def test_exchange_provider_rejection_raises(mock_client):
    mock_client.post.return_value = _response(
        "POST", GOOGLE_TOKEN_URL, status_code=400,
        json={"error": "invalid_grant", "error_description": "Bad Request"},
    )

    with pytest.raises(TokenExchangeError):
        await exchange_code_for_token("used-code", "cid", "csecret", "http://cb")


@pytest.mark.asyncio
async def test_exchange_network_error_raises(mock_client):
    mock_client.post.side_effect = httpx.ConnectError("connection refused")

    with pytest.raises(TokenExchangeError):
        await exchange_code_for_token("valid123", "cid", "csecret", "http://cb")


@pytest.mark.asyncio
async def test_exchange_non_json_body_raises(mock_client):
    mock_client.post.return_value = _response("POST", GOOGLE_TOKEN_URL, text="<html>oops</html>")

    with pytest.raises(TokenExchangeError):
        await exchange_code_for_token("valid123", "cid", "csecret", "http://cb")


# ---------- get_google_user ----------


@pytest.mark.asyncio
async def test_get_google_user_sends_bearer_header(mock_client):
    mock_client.get.return_value = _response("GET", GOOGLE_USERINFO_URL, json=MOCK_USERINFO)

    user = await get_google_user("tok")

    assert user == GoogleUser(
        sub="g-1",
        email="a@b.com",
        email_verified=True,
        name="Ann",
        given_name="Ann",
        family_name="Example",
        picture="https://example.com/ann.png",
    )
    args, kwargs = mock_client.get.call_args
    assert args[0] == GOOGLE_USERINFO_URL
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}


@pytest.mark.asyncio
async def test_get_google_user_unverified_email_raises(mock_client):
    mock_client.get.return_value = _response(
        "GET", GOOGLE_USERINFO_URL, json={**MOCK_USERINFO, "email_verified": False},
    )

    with pytest.raises(UnverifiedEmailError):
        await get_google_user("tok")


@pytest.mark.asyncio
async def test_get_google_user_missing_verified_flag_raises(mock_client):
    info = {k: v for k, v in MOCK_USERINFO.items() if k != "email_verified"}
    mock_client.get.return_value = _response("GET", GOOGLE_USERINFO_URL, json=info)

    with pytest.raises(UnverifiedEmailError):
        await get_google_user("tok")


@pytest.mark.asyncio
async def test_get_google_user_without_picture(mock_client):
    info = {k: v for k, v in MOCK_USERINFO.items() if k not in ("picture", "name")}
    mock_client.get.return_value = _response("GET", GOOGLE_USERINFO_URL, json=info)

    user = await get_google_user("tok")

    assert user.picture is None
    assert user.name is None


@pytest.mark.asyncio
async def test_get_google_user_expired_token_raises_profile_error(mock_client):
    mock_client.get.return_value = _response(
        "GET", GOOGLE_USERINFO_URL, status_code=401, json={"error": "invalid_request"},
    )

    with pytest.raises(ProfileFetchError):
        await get_google_user("expired")


# ---------- consent URL / client lifecycle ----------


def test_build_authorization_url():
    url = build_authorization_url("cid", "http://cb", "openid email profile")
    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    assert parsed.netloc == "accounts.google.com"
    assert query["client_id"] == ["cid"]
    assert query["redirect_uri"] == ["http://cb"]
    assert query["response_type"] == ["code"]
    assert query["scope"] == ["openid email profile"]
    assert "state" not in query


@pytest.mark.asyncio
async def test_close_client_resets_shared_client():
    client = google_client._get_client()
    assert google_client._get_client() is client

    await google_client.close_client()

    assert google_client._client is None
