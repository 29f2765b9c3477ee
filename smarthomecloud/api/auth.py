"""Auth API: register, login, logout, profile, password change/reset."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_auth
from smarthomecloud.schemas import (
    RegisterRequest, LoginRequest, ProfileUpdate, UserRead,
    PasswordChangeRequest, PasswordForgotRequest, PasswordResetRequest,
)
from smarthomecloud.services.auth import (
    AuthContext, verify_password, hash_password, SESSION_COOKIE_NAME,
    create_session, set_session_cookie, remove_session, remove_all_user_sessions,
    create_password_reset, consume_password_reset,
)
from smarthomecloud.services.email import send_password_reset_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else ""


# ── Register / Login / Logout ─────────────────────────────

@router.post("/register")
async def register(
    body: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    if await crud.get_user_by_email(db, body.email):
        return JSONResponse(status_code=400, content={"detail": "User with this email already exists"})

    user = await crud.create_user(
        db,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        role="homeowner",
        password_hash=hash_password(body.password),
    )
    token = await create_session(user, db, ip_address=_client_ip(request))
    await db.refresh(user)

    response = JSONResponse(status_code=201, content=UserRead.model_validate(user).model_dump(mode="json"))
    set_session_cookie(response, token)
    return response


@router.post("/login")
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    user = await crud.get_user_by_email(db, body.email)
    if user and not user.password_hash:
        return JSONResponse(status_code=401, content={"detail": "Please use OAuth to log in"})

    if not user or not verify_password(body.password, user.password_hash):
        logger.warning("Failed login for %s from %s", body.email, _client_ip(request))
        return JSONResponse(status_code=401, content={"detail": "Invalid email or password"})

    if not user.is_active:
        logger.warning("Login attempt on deactivated account %s", user.id)
        return JSONResponse(status_code=401, content={"detail": "Account is deactivated"})

    token = await create_session(user, db, ip_address=_client_ip(request))
    await db.refresh(user)

    response = JSONResponse(content=UserRead.model_validate(user).model_dump(mode="json"))
    set_session_cookie(response, token)
    return response


@router.post("/logout")
async def logout(
    request: Request,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        await remove_session(token, db)
    response = JSONResponse(content={"ok": True})
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


# ── Current user ──────────────────────────────────────────

@router.get("/user", response_model=UserRead)
@router.get("/me", response_model=UserRead, include_in_schema=False)
async def get_me(
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    user = await crud.get_user(db, auth.user_id)
    if not user:
        raise HTTPException(404, "User not found")
    return user


@router.patch("/user", response_model=UserRead)
async def update_me(
    body: dict = Body(...),
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Self-service profile update. Role is never writable here."""
    if "role" in body:
        logger.warning("User %s tried to change their own role", auth.user_id)
        raise HTTPException(403, "You cannot change your own role")

    try:
        update = ProfileUpdate.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False, include_context=False)) from e

    user = await crud.get_user(db, auth.user_id)
    if not user:
        raise HTTPException(404, "User not found")

    changes = update.model_dump(exclude_unset=True)
    if "email" in changes:
        other = await crud.get_user_by_email(db, changes["email"])
        if other and other.id != user.id:
            raise HTTPException(409, "Email already in use")
    return await crud.update_user(db, user, **changes)


# ── Password Change ───────────────────────────────────────

@router.post("/password/change")
async def password_change(
    body: PasswordChangeRequest,
    auth: AuthContext = Depends(require_auth),
    db: AsyncSession = Depends(get_db),
):
    """Change password for the currently logged-in user."""
    user = await crud.get_user(db, auth.user_id)
    if not user:
        return JSONResponse(status_code=400, content={"detail": "User not found"})

    if not user.password_hash:
        return JSONResponse(status_code=400, content={"detail": "This account signs in with OAuth"})

    if not verify_password(body.current_password, user.password_hash):
        return JSONResponse(status_code=401, content={"detail": "Current password is incorrect"})

    await crud.update_user(db, user, password_hash=hash_password(body.new_password))
    return {"ok": True, "message": "Password updated"}


# ── Password Reset ────────────────────────────────────────

@router.post("/password/forgot")
async def password_forgot(
    body: PasswordForgotRequest,
    db: AsyncSession = Depends(get_db),
):
    """Send a password reset email (always returns 200 to prevent enumeration)."""
    user = await crud.get_user_by_email(db, body.email)
    if user and user.is_active:
        token = await create_password_reset(user, db)
        send_password_reset_email(user.email, token)

    return {"ok": True, "message": "If an account exists, a reset link has been sent."}


@router.post("/password/reset")
async def password_reset(
    body: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
):
    """Reset password using a valid token."""
    user = await consume_password_reset(body.token, db)
    if not user:
        return JSONResponse(status_code=400, content={"detail": "Invalid or expired reset token"})

    await crud.update_user(db, user, password_hash=hash_password(body.new_password))
    await remove_all_user_sessions(user.id, db)
    return {"ok": True, "message": "Password updated. Please log in."}
