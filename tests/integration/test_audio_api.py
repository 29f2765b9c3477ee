"""Integration tests for audio upload analysis."""

from __future__ import annotations

from smarthomecloud.config import AudioConfig, Settings
from smarthomecloud.dependencies import get_settings_dep
from smarthomecloud.main import app

WAV = b"RIFF\x24\x00\x00\x00WAVEfmt "


async def _upload(client, device_id, name="glass_break.wav", content=WAV, mime="audio/wav"):
    return await client.post(
        "/api/audio/analyze",
        files={"audio": (name, content, mime)},
        data={"deviceId": device_id},
    )


async def test_glass_break_generates_critical_alert(env):
    r = await _upload(env.iot, env.devices["mic"].id)
    assert r.status_code == 201
    body = r.json()

    assert body["analysis"]["primary_detection"]["class"] == "Glass breaking"
    assert body["analysis"]["should_generate_alert"] is True

    alert = body["alert"]
    assert alert["type"] == "glass_break"
    assert alert["severity"] == "critical"
    assert alert["title"] == "EMERGENCY: Glass breaking detected at Hallway - Owner Home"
    assert alert["location"] == "Hallway - Owner Home"
    assert 0.75 <= alert["ai_confidence"] <= 0.99
    assert alert["ai_details"][0]["label"] == "Glass breaking"

    detection = body["detection"]
    assert detection["alert_generated"] is True
    assert detection["alert_id"] == alert["id"]
    assert detection["file_size"] == len(WAV)
    assert detection["model_used"] == "yamnet"

    # the homeowner sees the generated alert
    r = await env.owner.get("/api/alerts")
    assert [a["id"] for a in r.json()] == [alert["id"]]


async def test_animal_sound_maps_to_intrusion(env):
    r = await _upload(env.staff, env.devices["mic"].id, name="dog_bark.mp3", mime="audio/mpeg")
    assert r.status_code == 201
    alert = r.json()["alert"]
    assert alert["type"] == "intrusion"
    assert alert["severity"] == "medium"
    assert alert["title"].startswith("Animal detected: Dog barking at ")
    assert r.json()["detection"]["model_used"] == "hubert"


async def test_low_severity_sound_has_no_alert(env):
    r = await _upload(env.iot, env.devices["mic"].id, name="cough.wav")
    assert r.status_code == 201
    body = r.json()
    assert body["alert"] is None
    assert body["detection"]["alert_generated"] is False
    assert body["detection"]["alert_id"] is None
    assert body["analysis"]["alert_severity"] == "low"


async def test_unmatched_file_is_background_noise(env):
    r = await _upload(env.iot, env.devices["mic"].id, name="recording_0001.wav")
    assert r.status_code == 201
    body = r.json()
    assert body["detection"]["detected_class"] == "Background ambient noise"
    assert 0.60 <= body["detection"]["confidence"] <= 0.80
    assert body["alert"] is None


async def test_analyze_validation_errors(env):
    r = await env.iot.post("/api/audio/analyze", data={"deviceId": env.devices["mic"].id})
    assert r.status_code == 400

    r = await env.iot.post("/api/audio/analyze", files={"audio": ("scream.wav", WAV, "audio/wav")})
    assert r.status_code == 400

    r = await _upload(env.iot, "missing")
    assert r.status_code == 404

    r = await _upload(env.iot, env.devices["mic"].id, name="scream.txt", mime="text/plain")
    assert r.status_code == 400


async def test_analyze_rejects_oversize_upload(env):
    app.dependency_overrides[get_settings_dep] = lambda: Settings(audio=AudioConfig(max_upload_bytes=8))
    r = await _upload(env.iot, env.devices["mic"].id)
    assert r.status_code == 413


async def test_analyze_requires_staff(env):
    r = await _upload(env.owner, env.devices["mic"].id)
    assert r.status_code == 403


async def test_detection_history(env):
    await _upload(env.iot, env.devices["mic"].id, name="glass.wav")
    await _upload(env.iot, env.devices["mic"].id, name="knock.wav")

    r = await env.staff.get("/api/audio/detections")
    assert r.status_code == 200
    assert len(r.json()) == 2

    r = await env.iot.get(f"/api/audio/detections/device/{env.devices['mic'].id}", params={"limit": 1})
    assert len(r.json()) == 1

    r = await env.iot.get("/api/audio/detections/device/missing")
    assert r.status_code == 404

    r = await env.owner.get("/api/audio/detections")
    assert r.status_code == 403
