"""Integration tests for the OAuth start/callback round trip."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from smarthomecloud.api.oauth import STATE_COOKIE
from smarthomecloud.config import OAuthProviderConfig
from smarthomecloud.models import User
from smarthomecloud.services.auth import SESSION_COOKIE_NAME
from smarthomecloud.services.oauth import GoogleOAuthProvider

CONFIG = OAuthProviderConfig(
    client_id="client-1", client_secret="secret-1", redirect_uri="http://test/api/auth/google/callback",
)


@pytest.fixture
def token_requests():
    return []


@pytest.fixture
def google(monkeypatch, token_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/token":
            token_requests.append(parse_qs(request.content.decode()))
            return httpx.Response(200, json={"access_token": "at-1"})
        return httpx.Response(200, json={
            "sub": "g-7", "email": "jane@example.com",
            "given_name": "Jane", "family_name": "Doe",
        })

    provider = GoogleOAuthProvider(CONFIG, transport=httpx.MockTransport(handler))
    monkeypatch.setattr(
        "smarthomecloud.api.oauth.get_provider",
        lambda name: provider if name == "google" else None,
    )
    return provider


def _client(env, **cookies) -> AsyncClient:
    return AsyncClient(transport=env.transport, base_url="http://test", cookies=cookies)


async def test_start_sets_state_cookie(env, google):
    r = await env.anon.get("/api/auth/google")
    assert r.status_code == 302
    location = urlparse(r.headers["location"])
    assert location.netloc == "accounts.google.com"
    state = parse_qs(location.query)["state"][0]
    assert r.cookies[STATE_COOKIE] == state


async def test_callback_rejects_state_mismatch(env, google, token_requests):
    async with _client(env, **{STATE_COOKIE: "expected-state"}) as client:
        r = await client.get("/api/auth/google/callback", params={"code": "c-1", "state": "forged-state"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid OAuth state"
    assert token_requests == []


async def test_callback_without_state_cookie(env, google):
    r = await env.anon.get("/api/auth/google/callback", params={"code": "c-1", "state": "any"})
    assert r.status_code == 400


async def test_callback_without_code(env, google, token_requests):
    async with _client(env, **{STATE_COOKIE: "s-1"}) as client:
        r = await client.get("/api/auth/google/callback", params={"state": "s-1", "error": "access_denied"})
    assert r.status_code == 400
    assert r.json()["detail"] == "OAuth authorization failed"
    assert token_requests == []


async def test_callback_signs_in_new_homeowner(env, google, token_requests):
    r = await env.anon.get("/api/auth/google")
    state = parse_qs(urlparse(r.headers["location"]).query)["state"][0]

    async with _client(env, **{STATE_COOKIE: state}) as client:
        r = await client.get("/api/auth/google/callback", params={"code": "c-1", "state": state})
    assert r.status_code == 302
    assert r.headers["location"] == "/"
    token = r.cookies[SESSION_COOKIE_NAME]
    assert token_requests[0]["code"] == ["c-1"]

    async with _client(env, **{SESSION_COOKIE_NAME: token}) as client:
        r = await client.get("/api/auth/user")
    assert r.status_code == 200
    assert r.json()["email"] == "jane@example.com"
    assert r.json()["role"] == "homeowner"

    async with env.factory() as db:
        user = (await db.execute(select(User).where(User.email == "jane@example.com"))).scalar_one()
    assert (user.auth_provider, user.provider_subject) == ("google", "g-7")


async def test_callback_keeps_existing_role(env, google):
    await env.staff.post("/api/users", json={
        "email": "jane@example.com", "first_name": "Jane", "last_name": "Doe", "role": "iot_team",
    })

    async with _client(env, **{STATE_COOKIE: "s-2"}) as client:
        r = await client.get("/api/auth/google/callback", params={"code": "c-2", "state": "s-2"})
    assert r.status_code == 302

    async with _client(env, **{SESSION_COOKIE_NAME: r.cookies[SESSION_COOKIE_NAME]}) as client:
        r = await client.get("/api/auth/user")
    assert r.json()["role"] == "iot_team"
