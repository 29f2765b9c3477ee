"""Authentication service: DB-backed sessions and bcrypt passwords."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone, timedelta

import bcrypt
from fastapi import Request, HTTPException
from fastapi.responses import Response
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import get_settings
from smarthomecloud.models.user import User, UserSession, PasswordReset

_settings = get_settings()

SESSION_COOKIE_NAME = _settings.session.cookie_name
SESSION_MAX_AGE_DAYS = _settings.session.max_age_days
RESET_TOKEN_TTL = timedelta(hours=1)


@dataclass
class AuthContext:
    user_id: str
    role: str  # 'homeowner' | 'iot_team' | 'cloud_staff'
    email: str
    display_name: str

    @classmethod
    def from_user(cls, user: User) -> "AuthContext":
        name = f"{user.first_name} {user.last_name}".strip() or user.email
        return cls(user_id=user.id, role=user.role, email=user.email, display_name=name)


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _hash_token(token: str) -> str:
    """SHA-256 hash of a session/reset token for DB storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _aware(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt


async def create_session(user: User, db: AsyncSession, ip_address: str = "") -> str:
    """Create a DB-backed session. Returns the raw token (not the hash)."""
    token = secrets.token_urlsafe(48)
    expires_at = datetime.now(timezone.utc) + timedelta(days=SESSION_MAX_AGE_DAYS)

    session = UserSession(
        user_id=user.id,
        token_hash=_hash_token(token),
        expires_at=expires_at,
        ip_address=ip_address,
    )
    db.add(session)
    user.last_login_at = datetime.now(timezone.utc)
    await db.commit()
    return token


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME, token,
        httponly=True, samesite="lax",
        max_age=86400 * SESSION_MAX_AGE_DAYS,
    )


async def validate_session(token: str, db: AsyncSession) -> User | None:
    """Look up session by token hash, return User if valid."""
    result = await db.execute(
        select(UserSession).where(UserSession.token_hash == _hash_token(token))
    )
    session = result.scalars().first()
    if not session or _aware(session.expires_at) <= datetime.now(timezone.utc):
        return None

    user = await db.get(User, session.user_id)
    if not user or not user.is_active:
        return None
    return user


async def remove_session(token: str, db: AsyncSession) -> None:
    """Delete a session by token."""
    await db.execute(delete(UserSession).where(UserSession.token_hash == _hash_token(token)))
    await db.commit()


async def remove_all_user_sessions(user_id: str, db: AsyncSession) -> None:
    """Invalidate all sessions for a user (e.g. after password reset)."""
    await db.execute(delete(UserSession).where(UserSession.user_id == user_id))
    await db.commit()


async def get_current_user(request: Request, db: AsyncSession) -> AuthContext:
    """Read session cookie, validate, return AuthContext or raise 401."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = await validate_session(token, db)
    if not user:
        raise HTTPException(status_code=401, detail="Session expired")

    return AuthContext.from_user(user)


# ── Password reset tokens ────────────────────────────────

async def create_password_reset(user: User, db: AsyncSession) -> str:
    token = secrets.token_urlsafe(48)
    db.add(PasswordReset(
        user_id=user.id,
        token_hash=_hash_token(token),
        expires_at=datetime.now(timezone.utc) + RESET_TOKEN_TTL,
    ))
    await db.commit()
    return token


async def consume_password_reset(token: str, db: AsyncSession) -> User | None:
    """Return the user for a live reset token and delete the token. None if invalid."""
    result = await db.execute(
        select(PasswordReset).where(PasswordReset.token_hash == _hash_token(token))
    )
    reset = result.scalars().first()
    if not reset:
        return None
    expired = _aware(reset.expires_at) <= datetime.now(timezone.utc)
    await db.delete(reset)
    await db.commit()
    if expired:
        return None
    return await db.get(User, reset.user_id)
