"""House-level access rules shared by the REST routes and the websocket."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.db import crud
from smarthomecloud.models import House, User
from smarthomecloud.services.auth import AuthContext

HOMEOWNER = "homeowner"
IOT_TEAM = "iot_team"
CLOUD_STAFF = "cloud_staff"

ROLES = (HOMEOWNER, IOT_TEAM, CLOUD_STAFF)
STAFF_ROLES = (IOT_TEAM, CLOUD_STAFF)


def is_staff(auth: AuthContext) -> bool:
    return auth.role in STAFF_ROLES


def can_access_house(auth: AuthContext, house: House) -> bool:
    """Staff see every house; a homeowner only the houses they own."""
    if is_staff(auth):
        return True
    return house.owner_id is not None and house.owner_id == auth.user_id


async def scope_house_ids(auth: AuthContext, db: AsyncSession) -> list[str] | None:
    """House ids visible to ``auth``, or None when unrestricted."""
    if is_staff(auth):
        return None
    return await crud.list_house_ids_for_owner(db, auth.user_id)


class LastCloudStaffError(Exception):
    pass


async def ensure_cloud_staff_remains(db: AsyncSession, user: User) -> None:
    """Raise LastCloudStaffError if ``user`` is the only active cloud_staff account."""
    if user.role != CLOUD_STAFF or not user.is_active:
        return
    if await crud.count_active_users_with_role(db, CLOUD_STAFF) <= 1:
        raise LastCloudStaffError("At least one active cloud staff account is required")
