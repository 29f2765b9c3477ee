"""CRUD operations for all models.

List helpers that take ``house_ids`` treat ``None`` as "no restriction" (staff)
and a list as the homeowner's visible scope.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.models import (
    User, House, Device, Alert, AutomationRule, SensorReading,
    SurveillanceFeed, ConfigChangeLog, MaintenanceRecord, AudioDetection,
)


async def _apply(db: AsyncSession, obj, **kwargs):
    for k, v in kwargs.items():
        setattr(obj, k, v)
    await db.commit()
    await db.refresh(obj)
    return obj


# ── Users ─────────────────────────────────────────────────

async def create_user(
    db: AsyncSession, email: str, first_name: str = "", last_name: str = "",
    role: str = "homeowner", password_hash: str | None = None,
    auth_provider: str = "local", provider_subject: str | None = None,
    profile_image_url: str | None = None,
) -> User:
    user = User(
        email=email, first_name=first_name, last_name=last_name, role=role,
        password_hash=password_hash, auth_provider=auth_provider,
        provider_subject=provider_subject, profile_image_url=profile_image_url,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_user(db: AsyncSession, user_id: str) -> User | None:
    return await db.get(User, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
    return result.scalars().first()


async def list_users(db: AsyncSession, role: str | None = None) -> list[User]:
    query = select(User).order_by(User.created_at.desc())
    if role:
        query = query.where(User.role == role)
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_recently_active_users(db: AsyncSession, limit: int = 5) -> list[User]:
    result = await db.execute(
        select(User)
        .where(User.is_active == True, User.last_login_at.is_not(None))
        .order_by(User.last_login_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def count_active_users_with_role(db: AsyncSession, role: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(User).where(User.role == role, User.is_active == True)
    )
    return result.scalar() or 0


async def update_user(db: AsyncSession, user: User, **kwargs) -> User:
    return await _apply(db, user, **kwargs)


# ── Houses ────────────────────────────────────────────────

async def create_house(db: AsyncSession, owner_id: str | None, **fields) -> House:
    house = House(owner_id=owner_id, **fields)
    db.add(house)
    await db.commit()
    await db.refresh(house)
    return house


async def get_house(db: AsyncSession, house_id: str) -> House | None:
    return await db.get(House, house_id)


async def list_houses(db: AsyncSession, house_ids: list[str] | None = None) -> list[House]:
    query = select(House).order_by(House.created_at)
    if house_ids is not None:
        query = query.where(House.id.in_(house_ids))
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_house_ids_for_owner(db: AsyncSession, owner_id: str) -> list[str]:
    result = await db.execute(select(House.id).where(House.owner_id == owner_id))
    return list(result.scalars().all())


async def update_house(db: AsyncSession, house: House, **kwargs) -> House:
    return await _apply(db, house, **kwargs)


async def delete_house(db: AsyncSession, house: House) -> None:
    await db.delete(house)
    await db.commit()


# ── Devices ───────────────────────────────────────────────

async def create_device(db: AsyncSession, **fields) -> Device:
    device = Device(**fields)
    db.add(device)
    await db.commit()
    await db.refresh(device)
    return device


async def get_device(db: AsyncSession, device_id: str) -> Device | None:
    return await db.get(Device, device_id)


async def get_device_by_serial(db: AsyncSession, serial_number: str) -> Device | None:
    result = await db.execute(select(Device).where(Device.serial_number == serial_number))
    return result.scalars().first()


async def list_devices(
    db: AsyncSession, house_ids: list[str] | None = None,
    house_id: str | None = None, device_type: str | None = None, status: str | None = None,
) -> list[Device]:
    query = select(Device).order_by(Device.created_at.desc())
    if house_ids is not None:
        query = query.where(Device.house_id.in_(house_ids))
    if house_id:
        query = query.where(Device.house_id == house_id)
    if device_type:
        query = query.where(Device.type == device_type)
    if status:
        query = query.where(Device.status == status)
    result = await db.execute(query)
    return list(result.scalars().all())


async def list_stale_online_devices(db: AsyncSession, cutoff: datetime) -> list[Device]:
    """Online devices that have not reported since ``cutoff``."""
    result = await db.execute(
        select(Device).where(
            Device.status == "online",
            Device.last_seen.is_not(None),
            Device.last_seen < cutoff,
        )
    )
    return list(result.scalars().all())


async def list_low_battery_devices(db: AsyncSession, threshold: int) -> list[Device]:
    result = await db.execute(
        select(Device).where(Device.battery_level.is_not(None), Device.battery_level < threshold)
    )
    return list(result.scalars().all())


async def update_device(db: AsyncSession, device: Device, **kwargs) -> Device:
    return await _apply(db, device, **kwargs)


async def delete_device(db: AsyncSession, device: Device) -> None:
    await db.delete(device)
    await db.commit()


# ── Alerts ────────────────────────────────────────────────

async def create_alert(db: AsyncSession, **fields) -> Alert:
    alert = Alert(**fields)
    db.add(alert)
    await db.commit()
    await db.refresh(alert)
    return alert


async def get_alert(db: AsyncSession, alert_id: str) -> Alert | None:
    return await db.get(Alert, alert_id)


async def list_alerts(
    db: AsyncSession, house_ids: list[str] | None = None,
    house_id: str | None = None, status: str | None = None,
    severity: str | None = None, limit: int | None = None,
) -> list[Alert]:
    query = select(Alert).order_by(Alert.created_at.desc())
    if house_ids is not None:
        query = query.where(Alert.house_id.in_(house_ids))
    if house_id:
        query = query.where(Alert.house_id == house_id)
    if status:
        query = query.where(Alert.status == status)
    if severity:
        query = query.where(Alert.severity == severity)
    if limit:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def has_open_alert(db: AsyncSession, device_id: str, alert_type: str) -> bool:
    """True when the device already has a new/acknowledged alert of this type."""
    result = await db.execute(
        select(func.count()).select_from(Alert).where(
            Alert.device_id == device_id,
            Alert.type == alert_type,
            Alert.status.in_(["new", "acknowledged"]),
        )
    )
    return (result.scalar() or 0) > 0


async def update_alert(db: AsyncSession, alert: Alert, **kwargs) -> Alert:
    return await _apply(db, alert, **kwargs)


# ── Automation rules ─────────────────────────────────────

async def create_automation_rule(db: AsyncSession, house_id: str, **fields) -> AutomationRule:
    rule = AutomationRule(house_id=house_id, **fields)
    db.add(rule)
    await db.commit()
    await db.refresh(rule)
    return rule


async def get_automation_rule(db: AsyncSession, rule_id: str) -> AutomationRule | None:
    return await db.get(AutomationRule, rule_id)


async def list_automation_rules_for_house(db: AsyncSession, house_id: str) -> list[AutomationRule]:
    result = await db.execute(
        select(AutomationRule)
        .where(AutomationRule.house_id == house_id)
        .order_by(AutomationRule.created_at)
    )
    return list(result.scalars().all())


async def update_automation_rule(db: AsyncSession, rule: AutomationRule, **kwargs) -> AutomationRule:
    return await _apply(db, rule, **kwargs)


async def delete_automation_rule(db: AsyncSession, rule: AutomationRule) -> None:
    await db.delete(rule)
    await db.commit()


# ── Sensor readings ──────────────────────────────────────

async def create_sensor_reading(
    db: AsyncSession, device_id: str, data_type: str,
    value: float | None = None, metadata: dict | None = None,
) -> SensorReading:
    reading = SensorReading(
        device_id=device_id, data_type=data_type, value=value, metadata_json=metadata,
    )
    db.add(reading)
    await db.commit()
    await db.refresh(reading)
    return reading


async def list_readings_for_device(db: AsyncSession, device_id: str, limit: int = 100) -> list[SensorReading]:
    result = await db.execute(
        select(SensorReading)
        .where(SensorReading.device_id == device_id)
        .order_by(SensorReading.recorded_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


# ── Surveillance feeds ───────────────────────────────────

async def create_surveillance_feed(
    db: AsyncSession, device_id: str, feed_url: str,
    thumbnail_url: str | None = None, is_live: bool = True,
) -> SurveillanceFeed:
    feed = SurveillanceFeed(
        device_id=device_id, feed_url=feed_url, thumbnail_url=thumbnail_url, is_live=is_live,
    )
    db.add(feed)
    await db.commit()
    await db.refresh(feed)
    return feed


async def list_feeds_for_house(db: AsyncSession, house_id: str) -> list[SurveillanceFeed]:
    result = await db.execute(
        select(SurveillanceFeed)
        .join(Device, SurveillanceFeed.device_id == Device.id)
        .where(Device.house_id == house_id)
        .order_by(SurveillanceFeed.created_at)
    )
    return list(result.scalars().all())


# ── Config change logs ───────────────────────────────────

async def create_config_log(
    db: AsyncSession, user_id: str, config_key: str,
    old_value: str | None, new_value: str | None, commit: bool = True,
) -> ConfigChangeLog:
    log = ConfigChangeLog(
        user_id=user_id, config_key=config_key, old_value=old_value, new_value=new_value,
    )
    db.add(log)
    if commit:
        await db.commit()
        await db.refresh(log)
    return log


async def list_config_logs(db: AsyncSession, limit: int = 50) -> list[ConfigChangeLog]:
    result = await db.execute(
        select(ConfigChangeLog).order_by(ConfigChangeLog.recorded_at.desc()).limit(limit)
    )
    return list(result.scalars().all())


# ── Maintenance records ──────────────────────────────────

async def create_maintenance_record(db: AsyncSession, **fields) -> MaintenanceRecord:
    record = MaintenanceRecord(**fields)
    if record.status == "completed":
        record.completed_at = datetime.now(timezone.utc)
    db.add(record)
    await db.commit()
    await db.refresh(record)
    return record


async def get_maintenance_record(db: AsyncSession, record_id: str) -> MaintenanceRecord | None:
    return await db.get(MaintenanceRecord, record_id)


async def list_maintenance_records(db: AsyncSession) -> list[MaintenanceRecord]:
    result = await db.execute(
        select(MaintenanceRecord).order_by(
            MaintenanceRecord.scheduled_date, MaintenanceRecord.scheduled_time,
        )
    )
    return list(result.scalars().all())


async def update_maintenance_record(db: AsyncSession, record: MaintenanceRecord, **kwargs) -> MaintenanceRecord:
    status = kwargs.get("status")
    if status == "completed" and record.status != "completed":
        kwargs["completed_at"] = datetime.now(timezone.utc)
    elif status is not None and status != "completed":
        kwargs["completed_at"] = None
    return await _apply(db, record, **kwargs)


async def delete_maintenance_record(db: AsyncSession, record: MaintenanceRecord) -> None:
    await db.delete(record)
    await db.commit()


# ── Audio detections ─────────────────────────────────────

async def create_audio_detection(db: AsyncSession, **fields) -> AudioDetection:
    detection = AudioDetection(**fields)
    db.add(detection)
    await db.commit()
    await db.refresh(detection)
    return detection


async def list_audio_detections(
    db: AsyncSession, device_id: str | None = None, limit: int = 50,
) -> list[AudioDetection]:
    query = select(AudioDetection).order_by(AudioDetection.created_at.desc()).limit(limit)
    if device_id:
        query = query.where(AudioDetection.device_id == device_id)
    result = await db.execute(query)
    return list(result.scalars().all())


async def update_audio_detection(db: AsyncSession, detection: AudioDetection, **kwargs) -> AudioDetection:
    return await _apply(db, detection, **kwargs)


# ── Dashboard aggregates ─────────────────────────────────

async def count_grouped(db: AsyncSession, column, *where) -> dict[str, int]:
    """``SELECT column, count(*) ... GROUP BY column`` as a dict."""
    query = select(column, func.count()).group_by(column)
    for clause in where:
        query = query.where(clause)
    result = await db.execute(query)
    return {key: count for key, count in result.all()}


async def count_rows(db: AsyncSession, model, *where) -> int:
    query = select(func.count()).select_from(model)
    for clause in where:
        query = query.where(clause)
    result = await db.execute(query)
    return result.scalar() or 0
