"""OAuth / OIDC sign-in redirects and callbacks."""

from __future__ import annotations

import logging
import secrets

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import get_settings
from smarthomecloud.db.engine import get_db
from smarthomecloud.services.auth import create_session, set_session_cookie
from smarthomecloud.services.oauth import OAuthError, get_provider, upsert_oauth_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["oauth"])

STATE_COOKIE = get_settings().session.oauth_state_cookie
STATE_MAX_AGE = 600


def _provider_or_404(name: str):
    provider = get_provider(name)
    if provider is None:
        raise HTTPException(404, f"OAuth provider '{name}' is not available")
    return provider


@router.get("/{provider_name}")
async def oauth_start(provider_name: str):
    provider = _provider_or_404(provider_name)
    state = secrets.token_urlsafe(24)
    try:
        url = await provider.get_authorization_url(state)
    except httpx.HTTPError:
        logger.exception("[%s] Could not build authorization URL", provider_name)
        raise HTTPException(502, "OAuth provider unavailable")

    response = RedirectResponse(url, status_code=302)
    response.set_cookie(
        STATE_COOKIE, state,
        httponly=True, samesite="lax", max_age=STATE_MAX_AGE,
    )
    return response


@router.get("/{provider_name}/callback")
async def oauth_callback(
    provider_name: str,
    request: Request,
    code: str = "",
    state: str = "",
    error: str = "",
    db: AsyncSession = Depends(get_db),
):
    provider = _provider_or_404(provider_name)

    expected = request.cookies.get(STATE_COOKIE)
    if not expected or not state or not secrets.compare_digest(expected, state):
        raise HTTPException(400, "Invalid OAuth state")
    if error or not code:
        logger.error("[%s] Authorization denied: %s", provider_name, error or "no code")
        raise HTTPException(400, "OAuth authorization failed")

    try:
        profile = await provider.authenticate(code)
    except OAuthError as e:
        logger.error("[%s] Sign-in failed: %s", provider_name, e)
        raise HTTPException(400, "OAuth sign-in failed")

    user = await upsert_oauth_user(db, provider.name, profile)
    if not user.is_active:
        raise HTTPException(401, "Account is deactivated")

    ip = request.client.host if request.client else ""
    token = await create_session(user, db, ip_address=ip)

    response = RedirectResponse("/", status_code=302)
    set_session_cookie(response, token)
    response.delete_cookie(STATE_COOKIE)
    return response
