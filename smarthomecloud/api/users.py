"""User management (cloud staff only)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import require_cloud_staff
from smarthomecloud.schemas import UserCreate, UserUpdate, UserRead
from smarthomecloud.services.access import LastCloudStaffError, ensure_cloud_staff_remains
from smarthomecloud.services.auth import AuthContext, hash_password, remove_all_user_sessions
from smarthomecloud.services.email import send_welcome_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(
    role: str | None = None,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_users(db, role=role)


@router.get("/active", response_model=list[UserRead])
async def list_active_users(
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_recently_active_users(db, limit=5)


@router.post("", response_model=UserRead, status_code=201)
async def create_user(
    body: UserCreate,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    if await crud.get_user_by_email(db, body.email):
        raise HTTPException(409, "User with this email already exists")

    user = await crud.create_user(
        db,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        role=body.role,
        password_hash=hash_password(body.password) if body.password else None,
    )
    logger.info("User %s created %s account %s", auth.user_id, user.role, user.id)
    send_welcome_email(user.email, user.first_name, user.role)
    return user


@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    body: UserUpdate,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    user = await crud.get_user(db, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    new_role = changes.get("role")

    if new_role and new_role != user.role:
        if user.id == auth.user_id:
            raise HTTPException(403, "You cannot change your own role")
        try:
            await ensure_cloud_staff_remains(db, user)
        except LastCloudStaffError:
            raise HTTPException(400, "Cannot demote the last cloud staff account")
        await crud.create_config_log(
            db, auth.user_id, f"user:{user.id}:role", user.role, new_role, commit=False,
        )
        logger.info("User %s changed role of %s: %s -> %s", auth.user_id, user.id, user.role, new_role)

    if changes.get("is_active") is False:
        if user.id == auth.user_id:
            raise HTTPException(400, "You cannot deactivate your own account")
        try:
            await ensure_cloud_staff_remains(db, user)
        except LastCloudStaffError:
            raise HTTPException(400, "Cannot deactivate the last cloud staff account")

    user = await crud.update_user(db, user, **changes)
    if changes.get("is_active") is False:
        await remove_all_user_sessions(user.id, db)
    return user


@router.delete("/{user_id}", response_model=UserRead)
async def deactivate_user(
    user_id: str,
    auth: AuthContext = Depends(require_cloud_staff),
    db: AsyncSession = Depends(get_db),
):
    if user_id == auth.user_id:
        raise HTTPException(400, "You cannot deactivate your own account")

    user = await crud.get_user(db, user_id)
    if not user:
        raise HTTPException(404, "User not found")

    try:
        await ensure_cloud_staff_remains(db, user)
    except LastCloudStaffError:
        raise HTTPException(400, "Cannot deactivate the last cloud staff account")

    user = await crud.update_user(db, user, is_active=False)
    await remove_all_user_sessions(user.id, db)
    logger.info("User %s deactivated %s", auth.user_id, user.id)
    return user
