"""OAuth 2.0 / OpenID Connect sign-in providers (Google, GitHub, generic OIDC)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import OAuthProviderConfig, OIDCProviderConfig, get_settings
from smarthomecloud.db import crud
from smarthomecloud.models import User

logger = logging.getLogger(__name__)


class OAuthError(Exception):
    pass


@dataclass
class OAuthProfile:
    subject: str
    email: str
    first_name: str = ""
    last_name: str = ""
    avatar_url: str | None = None


def _split_name(full_name: str) -> tuple[str, str]:
    first, _, last = (full_name or "").strip().partition(" ")
    return first, last.strip()


class OAuthProvider:
    """Authorization-code flow over httpx. Subclasses fill in endpoints and profile parsing."""

    name = ""
    scope = ""
    auth_url = ""
    token_url = ""

    def __init__(self, config: OAuthProviderConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.client_id = config.client_id
        self.client_secret = config.client_secret
        self.redirect_uri = config.redirect_uri
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=10.0)

    async def get_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": self.scope,
            "state": state,
        }
        return f"{await self._auth_endpoint()}?{urlencode(params)}"

    async def _auth_endpoint(self) -> str:
        return self.auth_url

    async def _token_endpoint(self) -> str:
        return self.token_url

    async def exchange_code_for_tokens(self, code: str) -> dict[str, Any]:
        async with self._client() as client:
            response = await client.post(
                await self._token_endpoint(),
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            return response.json()

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        raise NotImplementedError

    async def authenticate(self, code: str) -> OAuthProfile:
        """Exchange ``code`` and fetch the profile. Raises OAuthError on any failure."""
        try:
            tokens = await self.exchange_code_for_tokens(code)
            access_token = tokens.get("access_token")
            if not access_token:
                raise OAuthError("No access token received from token exchange")
            profile = await self.fetch_profile(access_token)
        except httpx.HTTPStatusError as e:
            logger.error("[%s] HTTP error during authentication: %s - %s",
                         self.name, e.response.status_code, e.response.text)
            raise OAuthError("Provider rejected the request") from e
        except httpx.RequestError as e:
            logger.error("[%s] Request error during authentication: %s", self.name, e)
            raise OAuthError("Provider unreachable") from e

        if not profile.email:
            raise OAuthError("Provider did not return an email address")
        return profile


class GoogleOAuthProvider(OAuthProvider):
    name = "google"
    scope = "openid email profile"
    auth_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    userinfo_url = "https://www.googleapis.com/oauth2/v3/userinfo"

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        async with self._client() as client:
            response = await client.get(
                self.userinfo_url, headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            info = response.json()
        return OAuthProfile(
            subject=str(info.get("sub", "")),
            email=info.get("email", ""),
            first_name=info.get("given_name", ""),
            last_name=info.get("family_name", ""),
            avatar_url=info.get("picture"),
        )


class GitHubOAuthProvider(OAuthProvider):
    name = "github"
    scope = "read:user user:email"
    auth_url = "https://github.com/login/oauth/authorize"
    token_url = "https://github.com/login/oauth/access_token"
    user_url = "https://api.github.com/user"
    emails_url = "https://api.github.com/user/emails"

    @staticmethod
    def get_primary_email(emails: list[dict[str, Any]]) -> str | None:
        for email in emails:
            if email.get("primary") and email.get("verified"):
                return email.get("email")
        for email in emails:
            if email.get("verified"):
                return email.get("email")
        return None

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/vnd.github.v3+json",
        }
        async with self._client() as client:
            response = await client.get(self.user_url, headers=headers)
            response.raise_for_status()
            info = response.json()
            email = info.get("email")
            if not email:
                # Private emails only show up on the emails endpoint
                response = await client.get(self.emails_url, headers=headers)
                response.raise_for_status()
                email = self.get_primary_email(response.json())
        first, last = _split_name(info.get("name") or info.get("login", ""))
        return OAuthProfile(
            subject=str(info.get("id", "")),
            email=email or "",
            first_name=first,
            last_name=last,
            avatar_url=info.get("avatar_url"),
        )


class OIDCProvider(OAuthProvider):
    """Any issuer that publishes ``/.well-known/openid-configuration``."""

    name = "oidc"
    scope = "openid email profile"

    def __init__(self, config: OIDCProviderConfig, transport: httpx.AsyncBaseTransport | None = None):
        super().__init__(config, transport)
        self.issuer_url = config.issuer_url.rstrip("/")
        self._discovery: dict[str, Any] | None = None

    async def discover(self) -> dict[str, Any]:
        if self._discovery is None:
            async with self._client() as client:
                response = await client.get(f"{self.issuer_url}/.well-known/openid-configuration")
                response.raise_for_status()
                self._discovery = response.json()
        return self._discovery

    async def _auth_endpoint(self) -> str:
        return (await self.discover())["authorization_endpoint"]

    async def _token_endpoint(self) -> str:
        return (await self.discover())["token_endpoint"]

    async def fetch_profile(self, access_token: str) -> OAuthProfile:
        userinfo_url = (await self.discover())["userinfo_endpoint"]
        async with self._client() as client:
            response = await client.get(userinfo_url, headers={"Authorization": f"Bearer {access_token}"})
            response.raise_for_status()
            info = response.json()
        first = info.get("given_name", "")
        last = info.get("family_name", "")
        if not first and info.get("name"):
            first, last = _split_name(info["name"])
        return OAuthProfile(
            subject=str(info.get("sub", "")),
            email=info.get("email", ""),
            first_name=first,
            last_name=last,
            avatar_url=info.get("picture"),
        )


_providers: dict[str, OAuthProvider] = {}


def get_provider(name: str) -> OAuthProvider | None:
    """Configured provider by name, or None when unknown or not configured."""
    oauth = get_settings().oauth
    config = getattr(oauth, name, None) if name in ("google", "github", "oidc") else None
    if config is None or not config.enabled:
        return None
    if name not in _providers:
        if name == "google":
            _providers[name] = GoogleOAuthProvider(config)
        elif name == "github":
            _providers[name] = GitHubOAuthProvider(config)
        else:
            _providers[name] = OIDCProvider(config)
    return _providers[name]


async def upsert_oauth_user(db: AsyncSession, provider: str, profile: OAuthProfile) -> User:
    """Match on email. New accounts are homeowners; existing ones keep their role."""
    user = await crud.get_user_by_email(db, profile.email)
    if user is None:
        user = await crud.create_user(
            db,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            role="homeowner",
            auth_provider=provider,
            provider_subject=profile.subject,
            profile_image_url=profile.avatar_url,
        )
        logger.info("Created %s user %s via OAuth", provider, user.id)
        return user

    changes: dict[str, Any] = {}
    if not user.provider_subject:
        changes["provider_subject"] = profile.subject
    if not user.profile_image_url and profile.avatar_url:
        changes["profile_image_url"] = profile.avatar_url
    if not user.first_name and profile.first_name:
        changes["first_name"] = profile.first_name
    if not user.last_name and profile.last_name:
        changes["last_name"] = profile.last_name
    if changes:
        user = await crud.update_user(db, user, **changes)
    return user
