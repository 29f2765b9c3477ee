"""Integration tests for registration, login, profile and OAuth routing."""

from __future__ import annotations

from datetime import datetime, timezone, timedelta

from sqlalchemy import select

from smarthomecloud.models import ConfigChangeLog, PasswordReset, User
from smarthomecloud.services.auth import SESSION_COOKIE_NAME, _hash_token

PASSWORD = "testpass123"


async def test_register_creates_homeowner_and_session(env):
    r = await env.anon.post("/api/auth/register", json={
        "email": "new@test.com", "password": "secret1",
        "first_name": "New", "last_name": "User",
    })
    assert r.status_code == 201
    assert r.json()["role"] == "homeowner"
    assert SESSION_COOKIE_NAME in r.cookies


async def test_register_duplicate_email(env):
    r = await env.anon.post("/api/auth/register", json={
        "email": "owner@test.com", "password": "secret1",
        "first_name": "Dup", "last_name": "User",
    })
    assert r.status_code == 400


async def test_register_short_password(env):
    r = await env.anon.post("/api/auth/register", json={
        "email": "short@test.com", "password": "12345",
        "first_name": "Short", "last_name": "Pw",
    })
    assert r.status_code == 422


async def test_login_success_and_failure(env):
    r = await env.anon.post("/api/auth/login", json={"email": "owner@test.com", "password": PASSWORD})
    assert r.status_code == 200
    assert r.json()["email"] == "owner@test.com"
    assert SESSION_COOKIE_NAME in r.cookies

    r = await env.anon.post("/api/auth/login", json={"email": "owner@test.com", "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"

    r = await env.anon.post("/api/auth/login", json={"email": "nobody@test.com", "password": "x"})
    assert r.status_code == 401


async def test_login_oauth_only_account(env):
    async with env.factory() as db:
        db.add(User(email="oauth@test.com", first_name="O", last_name="A",
                    auth_provider="google", provider_subject="g-1"))
        await db.commit()
    r = await env.anon.post("/api/auth/login", json={"email": "oauth@test.com", "password": "anything"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Please use OAuth to log in"


async def test_current_user(env):
    r = await env.owner.get("/api/auth/user")
    assert r.status_code == 200
    assert r.json()["role"] == "homeowner"

    r = await env.staff.get("/api/auth/me")
    assert r.status_code == 200
    assert r.json()["role"] == "cloud_staff"

    r = await env.anon.get("/api/auth/user")
    assert r.status_code == 401


async def test_profile_update_rejects_role(env):
    r = await env.owner.patch("/api/auth/user", json={"role": "cloud_staff"})
    assert r.status_code == 403

    r = await env.owner.get("/api/auth/user")
    assert r.json()["role"] == "homeowner"


async def test_profile_update_names(env):
    r = await env.owner.patch("/api/auth/user", json={"first_name": "Renamed"})
    assert r.status_code == 200
    assert r.json()["first_name"] == "Renamed"


async def test_profile_update_unknown_field(env):
    r = await env.owner.patch("/api/auth/user", json={"is_active": False})
    assert r.status_code == 422


async def test_profile_update_email_conflict(env):
    r = await env.owner.patch("/api/auth/user", json={"email": "staff@test.com"})
    assert r.status_code == 409


async def test_profile_update_rejects_null_required_fields(env):
    for field in ("email", "first_name", "last_name"):
        r = await env.owner.patch("/api/auth/user", json={field: None})
        assert r.status_code == 422, field

    r = await env.owner.get("/api/auth/user")
    assert r.json()["email"] == "owner@test.com"
    assert r.json()["first_name"] == "Owner"


async def test_logout_invalidates_session(env):
    r = await env.other.post("/api/auth/logout")
    assert r.status_code == 200
    r = await env.other.get("/api/auth/user")
    assert r.status_code == 401


async def test_password_change(env):
    r = await env.owner.post("/api/auth/password/change", json={
        "current_password": "wrong", "new_password": "newpass1",
    })
    assert r.status_code == 401

    r = await env.owner.post("/api/auth/password/change", json={
        "current_password": PASSWORD, "new_password": "newpass1",
    })
    assert r.status_code == 200

    r = await env.anon.post("/api/auth/login", json={"email": "owner@test.com", "password": "newpass1"})
    assert r.status_code == 200


async def test_password_forgot_and_reset(env):
    r = await env.anon.post("/api/auth/password/forgot", json={"email": "nobody@test.com"})
    assert r.status_code == 200

    r = await env.anon.post("/api/auth/password/forgot", json={"email": "other@test.com"})
    assert r.status_code == 200

    # The emailed token is never exposed, so plant a known one
    async with env.factory() as db:
        db.add(PasswordReset(
            user_id=env.users["other"].id,
            token_hash=_hash_token("reset-token"),
            expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        ))
        await db.commit()

    r = await env.anon.post("/api/auth/password/reset", json={"token": "reset-token", "new_password": "brandnew"})
    assert r.status_code == 200

    # all sessions dropped
    r = await env.other.get("/api/auth/user")
    assert r.status_code == 401

    r = await env.anon.post("/api/auth/password/reset", json={"token": "reset-token", "new_password": "again123"})
    assert r.status_code == 400


async def test_disabled_oauth_provider_is_404(env):
    r = await env.anon.get("/api/auth/google", follow_redirects=False)
    assert r.status_code == 404
    r = await env.anon.get("/api/auth/not-a-provider", follow_redirects=False)
    assert r.status_code == 404


# ── User management ──────────────────────────────────────

async def test_users_list_is_cloud_staff_only(env):
    r = await env.staff.get("/api/users")
    assert r.status_code == 200
    assert len(r.json()) == 4

    r = await env.iot.get("/api/users")
    assert r.status_code == 403
    detail = r.json()["detail"]
    assert detail["message"] == "Forbidden: Insufficient permissions"
    assert detail["required"] == ["cloud_staff"]
    assert detail["current"] == "iot_team"

    r = await env.anon.get("/api/users")
    assert r.status_code == 401


async def test_active_users_limited_to_five(env):
    for i in range(6):
        await env.anon.post("/api/auth/register", json={
            "email": f"u{i}@test.com", "password": "secret1",
            "first_name": "U", "last_name": str(i),
        })
    r = await env.staff.get("/api/users/active")
    assert r.status_code == 200
    assert len(r.json()) == 5


async def test_create_user(env):
    r = await env.staff.post("/api/users", json={
        "email": "tech@test.com", "first_name": "Tech", "last_name": "One", "role": "iot_team",
    })
    assert r.status_code == 201
    assert r.json()["role"] == "iot_team"

    r = await env.staff.post("/api/users", json={
        "email": "tech@test.com", "first_name": "Tech", "last_name": "Two",
    })
    assert r.status_code == 409

    r = await env.staff.post("/api/users", json={
        "email": "bad@test.com", "first_name": "Bad", "last_name": "Role", "role": "admin",
    })
    assert r.status_code == 422


async def test_change_role_is_logged(env):
    owner_id = env.users["owner"].id
    r = await env.staff.patch(f"/api/users/{owner_id}", json={"role": "iot_team"})
    assert r.status_code == 200
    assert r.json()["role"] == "iot_team"

    async with env.factory() as db:
        logs = (await db.execute(select(ConfigChangeLog))).scalars().all()
    assert [(l.config_key, l.old_value, l.new_value) for l in logs] == [
        (f"user:{owner_id}:role", "homeowner", "iot_team"),
    ]


async def test_cannot_change_own_role(env):
    r = await env.staff.patch(f"/api/users/{env.users['staff'].id}", json={"role": "homeowner"})
    assert r.status_code == 403


async def test_second_cloud_staff_can_be_demoted_and_deactivated(env):
    r = await env.staff.post("/api/users", json={
        "email": "ops@test.com", "first_name": "Ops", "last_name": "Lead", "role": "cloud_staff",
    })
    ops_id = r.json()["id"]

    r = await env.staff.patch(f"/api/users/{ops_id}", json={"role": "iot_team"})
    assert r.status_code == 200
    assert r.json()["role"] == "iot_team"

    r = await env.staff.patch(f"/api/users/{ops_id}", json={"role": "cloud_staff"})
    assert r.status_code == 200
    r = await env.staff.delete(f"/api/users/{ops_id}")
    assert r.status_code == 200
    assert r.json()["is_active"] is False


async def test_deactivate_user(env):
    r = await env.staff.delete(f"/api/users/{env.users['staff'].id}")
    assert r.status_code == 400

    r = await env.staff.delete(f"/api/users/{env.users['other'].id}")
    assert r.status_code == 200
    assert r.json()["is_active"] is False

    r = await env.other.get("/api/auth/user")
    assert r.status_code == 401

    r = await env.anon.post("/api/auth/login", json={"email": "other@test.com", "password": PASSWORD})
    assert r.status_code == 401
