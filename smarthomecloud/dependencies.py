"""FastAPI dependency providers for auth and role enforcement."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import Settings, get_settings
from smarthomecloud.db.engine import get_db
from smarthomecloud.services.auth import AuthContext, get_current_user


@lru_cache
def get_settings_dep() -> Settings:
    return get_settings()


async def require_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> AuthContext:
    """Require a valid authenticated session. Returns AuthContext."""
    return await get_current_user(request, db)


def require_role(*allowed_roles: str):
    """Factory: returns a dependency that enforces role membership."""
    async def _check(auth: AuthContext = Depends(require_auth)) -> AuthContext:
        if auth.role not in allowed_roles:
            raise HTTPException(403, {
                "message": "Forbidden: Insufficient permissions",
                "required": list(allowed_roles),
                "current": auth.role,
            })
        return auth
    return _check


require_staff = require_role("iot_team", "cloud_staff")
require_cloud_staff = require_role("cloud_staff")
