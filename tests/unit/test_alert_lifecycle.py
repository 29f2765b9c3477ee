import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from smarthomecloud.db import crud
from smarthomecloud.models import Base
from smarthomecloud.services.alerts import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    AlertTransitionError,
    alert_event,
    next_status,
    raise_alert,
    transition_alert,
)


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
async def staff(db):
    return await crud.create_user(db, "staff@example.com", role="cloud_staff")


@pytest_asyncio.fixture
async def alert(db):
    house = await crud.create_house(db, None, name="Oak House", address="1 Oak St")
    alert = await raise_alert(
        db, house_id=house.id, type="intrusion", severity="high",
        title="Door forced", description="Front door sensor tripped",
    )
    return alert


@pytest.mark.parametrize("current,action,expected", [
    ("new", "acknowledge", "acknowledged"),
    ("new", "resolve", "resolved"),
    ("new", "dismiss", "dismissed"),
    ("acknowledged", "resolve", "resolved"),
    ("acknowledged", "dismiss", "dismissed"),
])
def test_allowed_transitions(current, action, expected):
    assert next_status(current, action) == expected


@pytest.mark.parametrize("current,action", [
    ("acknowledged", "acknowledge"),
    ("resolved", "acknowledge"),
    ("resolved", "dismiss"),
    ("dismissed", "resolve"),
])
def test_rejected_transitions(current, action):
    with pytest.raises(AlertTransitionError):
        next_status(current, action)


@pytest.mark.parametrize("current", TERMINAL_STATUSES)
@pytest.mark.parametrize("action", sorted(TRANSITIONS))
def test_terminal_statuses_accept_no_action(current, action):
    with pytest.raises(AlertTransitionError):
        next_status(current, action)


def test_unknown_action():
    with pytest.raises(ValueError):
        next_status("new", "escalate")


async def test_raise_alert_defaults_to_new(alert):
    assert alert.status == "new"
    assert alert.acknowledged_by is None


async def test_acknowledge_then_resolve_stamps_users(db, alert, staff):
    alert = await transition_alert(db, alert, "acknowledge", staff.id)
    assert alert.status == "acknowledged"
    assert alert.acknowledged_by == staff.id
    assert alert.acknowledged_at is not None

    alert = await transition_alert(db, alert, "resolve", staff.id)
    assert alert.status == "resolved"
    assert alert.resolved_by == staff.id
    assert alert.resolved_at is not None

    with pytest.raises(AlertTransitionError):
        await transition_alert(db, alert, "dismiss", staff.id)


async def test_dismiss_leaves_resolution_fields_empty(db, alert, staff):
    alert = await transition_alert(db, alert, "dismiss", staff.id)
    assert alert.status == "dismissed"
    assert alert.resolved_by is None


async def test_alert_event_payload(alert):
    event = alert_event("alert_created", alert)
    assert event["event"] == "alert_created"
    assert event["house_id"] == alert.house_id
    assert event["data"]["id"] == alert.id
    assert event["data"]["status"] == "new"
