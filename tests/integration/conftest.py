"""Shared fixtures: an in-memory database seeded with one account per role."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone, timedelta

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from smarthomecloud import main
from smarthomecloud.db.engine import enable_sqlite_foreign_keys, get_db, get_session_factory
from smarthomecloud.main import app
from smarthomecloud.models import Base, User, UserSession, House, Device
from smarthomecloud.services.auth import hash_password, _hash_token, SESSION_COOKIE_NAME

PASSWORD = "testpass123"


@dataclass
class ApiEnv:
    factory: async_sessionmaker
    transport: ASGITransport
    users: dict[str, User] = field(default_factory=dict)
    tokens: dict[str, str] = field(default_factory=dict)
    houses: dict[str, House] = field(default_factory=dict)
    devices: dict[str, Device] = field(default_factory=dict)
    clients: dict[str, AsyncClient] = field(default_factory=dict)

    def __getattr__(self, name: str) -> AsyncClient:
        # env.staff / env.iot / env.owner / env.other / env.anon
        clients = self.__dict__.get("clients", {})
        if name in clients:
            return clients[name]
        raise AttributeError(name)


async def _seed(factory) -> tuple[dict, dict, dict, dict]:
    users, tokens, houses, devices = {}, {}, {}, {}
    async with factory() as db:
        for key, email, role in [
            ("staff", "staff@test.com", "cloud_staff"),
            ("iot", "iot@test.com", "iot_team"),
            ("owner", "owner@test.com", "homeowner"),
            ("other", "other@test.com", "homeowner"),
        ]:
            user = User(
                email=email, first_name=key.title(), last_name="Tester",
                password_hash=hash_password(PASSWORD), role=role,
            )
            db.add(user)
            await db.flush()
            token = f"token-{key}"
            db.add(UserSession(
                user_id=user.id,
                token_hash=_hash_token(token),
                expires_at=datetime.now(timezone.utc) + timedelta(hours=24),
                ip_address="127.0.0.1",
            ))
            users[key], tokens[key] = user, token

        houses["owner"] = House(owner_id=users["owner"].id, name="Owner Home", address="1 Main St")
        houses["other"] = House(owner_id=users["other"].id, name="Other Home", address="2 Side St")
        db.add_all(houses.values())
        await db.flush()

        devices["mic"] = Device(
            house_id=houses["owner"].id, name="Hall Mic", type="microphone", room="Hallway",
            serial_number="MIC-001", status="online", battery_level=80,
        )
        devices["cam"] = Device(
            house_id=houses["owner"].id, name="Porch Cam", type="camera", room="Porch",
            serial_number="CAM-001", status="online",
        )
        devices["other_thermo"] = Device(
            house_id=houses["other"].id, name="Thermostat", type="thermostat", room="Hallway",
            serial_number="TH-001", status="offline",
        )
        db.add_all(devices.values())
        await db.commit()
    return users, tokens, houses, devices


@pytest_asyncio.fixture
async def env():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    users, tokens, houses, devices = await _seed(factory)

    async def override_get_db():
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    api = ApiEnv(factory=factory, transport=transport, users=users, tokens=tokens,
                 houses=houses, devices=devices)
    for key, token in tokens.items():
        api.clients[key] = AsyncClient(
            transport=transport, base_url="http://test", cookies={SESSION_COOKIE_NAME: token},
        )
    api.clients["anon"] = AsyncClient(transport=transport, base_url="http://test")

    yield api

    for c in api.clients.values():
        await c.aclose()
    app.dependency_overrides.clear()
    await engine.dispose()


@dataclass
class SocketEnv:
    client: TestClient
    factory: async_sessionmaker
    users: dict[str, User]
    tokens: dict[str, str]
    houses: dict[str, House]
    devices: dict[str, Device]


@pytest.fixture
def socket_env(monkeypatch):
    """Seeded app behind a running TestClient. Async work goes through ``client.portal``
    so it shares the event loop with the websocket sessions."""
    async def no_create_all():
        pass

    monkeypatch.setattr(main, "create_all", no_create_all)
    monkeypatch.setattr(main._settings.device_monitor, "enabled", False)

    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    enable_sqlite_foreign_keys(engine)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def setup():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        return await _seed(factory)

    async def override_get_db():
        async with factory() as session:
            yield session

    def override_session_factory():
        return factory

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = override_session_factory

    with TestClient(app) as client:
        users, tokens, houses, devices = client.portal.call(setup)
        yield SocketEnv(client, factory, users, tokens, houses, devices)
        client.portal.call(engine.dispose)

    app.dependency_overrides.clear()
