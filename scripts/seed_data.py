"""Seed the database with demo houses, devices, alerts, rules and feeds."""

import asyncio
from datetime import datetime, timezone, timedelta

from smarthomecloud.db.engine import async_session_factory, create_all
from smarthomecloud.db import crud

HOUSES = [
    {"name": "Johnson Residence", "address": "123 Oak Street, San Francisco, CA 94102",
     "square_feet": 2400, "bedrooms": 3, "bathrooms": 2},
    {"name": "Smith Family Home", "address": "456 Maple Avenue, San Jose, CA 95112",
     "square_feet": 3200, "bedrooms": 4, "bathrooms": 3},
    {"name": "Anderson Senior Living", "address": "789 Pine Road, Oakland, CA 94601",
     "square_feet": 1800, "bedrooms": 2, "bathrooms": 2},
]

# (house index, key, fields)
DEVICES = [
    (0, "light-living", dict(name="Living Room Light", type="light", room="Living Room",
                             config={"brightness": 80, "color": "warm white"})),
    (0, "light-bedroom", dict(name="Bedroom Light", type="light", room="Master Bedroom",
                              config={"brightness": 60, "color": "soft white"})),
    (0, "thermostat", dict(name="Main Thermostat", type="thermostat", room="Hallway",
                           config={"targetTemp": 72, "mode": "auto", "humidity": 45})),
    (0, "lock-front", dict(name="Front Door Lock", type="lock", room="Entrance", battery_level=85,
                           config={"locked": True, "autoLock": True})),
    (0, "motion-living", dict(name="Living Room Sensor", type="motion_sensor", room="Living Room",
                              battery_level=78, config={"sensitivity": "medium", "armed": True})),
    (0, "motion-bedroom", dict(name="Bedroom Sensor", type="motion_sensor", room="Master Bedroom",
                               battery_level=68, config={"sensitivity": "high", "armed": True})),
    (0, "cam-front", dict(name="Front Yard Camera", type="camera", room="Front Yard",
                          config={"resolution": "1080p", "nightVision": True, "recording": True})),
    (0, "cam-living", dict(name="Living Room Camera", type="camera", room="Living Room",
                           config={"resolution": "1080p", "nightVision": False, "recording": True})),
    (0, "mic-hall", dict(name="Hallway Microphone", type="microphone", room="Hallway", battery_level=64)),
    (1, "thermostat-101", dict(name="Nest Thermostat", type="thermostat", room="Main Floor",
                               config={"targetTemp": 70, "mode": "cool", "humidity": 42})),
    (1, "cam-entrance", dict(name="Entrance Camera", type="camera", room="Front Door",
                             config={"resolution": "4K", "nightVision": True, "recording": True})),
    (2, "motion-fall", dict(name="Fall Detection Sensor", type="motion_sensor", room="Bedroom",
                            battery_level=95, config={"sensitivity": "high", "armed": True, "fallDetection": True})),
    (2, "cam-care", dict(name="Senior Care Camera", type="camera", room="Living Room",
                         config={"resolution": "1080p", "nightVision": True, "aiDetection": True})),
]

# (house index, device key, minutes ago, fields)
ALERTS = [
    (0, "motion-living", 120, dict(
        type="motion_detected", severity="medium", title="Motion Detected - Living Room",
        description="Unexpected motion detected in living room at 2:30 AM", location="Living Room",
        ai_confidence=0.87, ai_details={"anomaly": "unusual_time",
                                        "pattern": "No movement typically detected at this hour"})),
    (2, "motion-fall", 45, dict(
        type="fall_detected", severity="critical", title="Fall Detected - Senior Resident",
        description="AI detected potential fall in bedroom. Immediate attention required.",
        location="Bedroom", status="acknowledged", ai_confidence=0.94,
        ai_details={"anomaly": "fall_pattern",
                    "pattern": "Sudden vertical movement followed by prolonged stillness"})),
    (0, "lock-front", 240, dict(
        type="device_offline", severity="high", title="Front Door Lock Offline",
        description="Smart lock lost connection. Battery may be low.", location="Entrance",
        status="resolved")),
    (1, "thermostat-101", 60, dict(
        type="temperature_anomaly", severity="medium", title="Temperature Spike Detected",
        description="Living room temperature rose to 85°F unexpectedly", location="Main Floor",
        ai_confidence=0.76, ai_details={"anomaly": "temperature_spike",
                                        "pattern": "15°F increase in 30 minutes"})),
    (0, "cam-front", 15, dict(
        type="intrusion", severity="critical", title="Unrecognized Person Detected",
        description="AI detected unknown individual approaching front door", location="Front Yard",
        ai_confidence=0.91, ai_details={"anomaly": "unknown_face",
                                        "pattern": "Face not in resident database"})),
    (2, "cam-care", 20, dict(
        type="scream_detected", severity="high", title="Distress Audio Detected",
        description="AI audio analysis detected possible distress vocalization",
        location="Living Room", status="acknowledged", ai_confidence=0.83,
        ai_details={"anomaly": "distress_sound",
                    "pattern": "High-frequency vocalization with irregular pattern"})),
]

RULES = [
    (0, "Night Mode", "Time-based: 22:00", "Dim lights to 20%, Lock front door"),
    (0, "Away Mode", "Manual activation", "Turn off all lights, Set thermostat to 68°F"),
    (2, "Fall Detection Alert", "Fall detected by bedroom sensor",
     "Send emergency notification, Start camera recording"),
]

FEEDS = [
    ("cam-front", "rtsp://mock-stream/front-yard", True),
    ("cam-living", "rtsp://mock-stream/living-room", True),
    ("cam-entrance", "rtsp://mock-stream/entrance", True),
    ("cam-care", "rtsp://mock-stream/senior-care", True),
]

MAINTENANCE = [
    dict(task="Database backup verification", scheduled_date="2025-01-15", category="database", priority="high"),
    dict(task="Rotate camera firmware to 2.4.1", scheduled_date="2025-01-20", category="hardware"),
    dict(task="Renew TLS certificates", scheduled_date="2025-02-01", category="security", priority="critical"),
]


async def seed():
    await create_all()

    async with async_session_factory() as db:
        existing = await crud.list_houses(db)
        if any(h.name == "Johnson Residence" for h in existing):
            print("Demo data already exists, skipping seed.")
            return

        # Houses start unowned; staff assign them with PATCH/POST owner_id
        houses = [await crud.create_house(db, None, **h) for h in HOUSES]
        for h in houses:
            print(f"Created house: {h.name} (id: {h.id})")

        now = datetime.now(timezone.utc)
        devices = {}
        for idx, key, fields in DEVICES:
            devices[key] = await crud.create_device(
                db, house_id=houses[idx].id, status="online", last_seen=now,
                firmware_version="2.3.0", **fields,
            )
        print(f"Created {len(devices)} devices")

        for idx, key, minutes_ago, fields in ALERTS:
            await crud.create_alert(
                db, house_id=houses[idx].id, device_id=devices[key].id,
                created_at=now - timedelta(minutes=minutes_ago), **fields,
            )
        print(f"Created {len(ALERTS)} alerts")

        for idx, name, trigger, action in RULES:
            await crud.create_automation_rule(db, houses[idx].id, name=name, trigger=trigger, action=action)

        for key, url, live in FEEDS:
            await crud.create_surveillance_feed(db, devices[key].id, url, is_live=live)

        for record in MAINTENANCE:
            await crud.create_maintenance_record(db, **record)

    print("\nSeed complete. Start the server with: uvicorn smarthomecloud.main:app --reload")


if __name__ == "__main__":
    asyncio.run(seed())
