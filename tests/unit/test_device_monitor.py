from datetime import datetime, timezone, timedelta

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from smarthomecloud.config import DeviceMonitorConfig
from smarthomecloud.db import crud
from smarthomecloud.models import Base
from smarthomecloud.services.device_monitor import sweep

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def db():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def house(db):
    return await crud.create_house(db, None, name="Oak House", address="1 Oak St")


async def test_stale_device_goes_offline(db, house):
    stale = await crud.create_device(
        db, house_id=house.id, name="Porch Cam", type="camera", room="Porch",
        status="online", last_seen=NOW - timedelta(minutes=30),
    )
    fresh = await crud.create_device(
        db, house_id=house.id, name="Hall Mic", type="microphone", room="Hall",
        status="online", last_seen=NOW - timedelta(minutes=2),
    )

    result = await sweep(db, DeviceMonitorConfig(offline_after_minutes=15), now=NOW)
    assert result.marked_offline == 1

    assert (await crud.get_device(db, stale.id)).status == "offline"
    assert (await crud.get_device(db, fresh.id)).status == "online"

    alerts = await crud.list_alerts(db)
    assert [(a.type, a.severity, a.title) for a in alerts] == [
        ("device_offline", "high", "Device offline: Porch Cam"),
    ]

    # already offline, nothing more to do
    result = await sweep(db, DeviceMonitorConfig(offline_after_minutes=15), now=NOW)
    assert result.marked_offline == 0


async def test_low_battery_alert_not_duplicated(db, house):
    lock = await crud.create_device(
        db, house_id=house.id, name="Front Lock", type="lock", room="Entry", battery_level=12,
    )
    await crud.create_device(
        db, house_id=house.id, name="Back Lock", type="lock", room="Kitchen", battery_level=75,
    )
    config = DeviceMonitorConfig(low_battery_threshold=20)

    result = await sweep(db, config, now=NOW)
    assert result.low_battery_alerts == 1
    alerts = await crud.list_alerts(db)
    assert len(alerts) == 1
    assert alerts[0].device_id == lock.id
    assert alerts[0].severity == "low"
    assert "12%" in alerts[0].description

    result = await sweep(db, config, now=NOW)
    assert result.low_battery_alerts == 0

    # a resolved alert lets the next sweep raise a fresh one
    await crud.update_alert(db, alerts[0], status="resolved")
    result = await sweep(db, config, now=NOW)
    assert result.low_battery_alerts == 1
