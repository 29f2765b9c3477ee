"""Audio upload analysis and detection history (staff only)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from smarthomecloud.config import Settings
from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_db
from smarthomecloud.dependencies import get_settings_dep, require_staff
from smarthomecloud.schemas import AlertRead, AudioAnalyzeResponse, AudioDetectionRead
from smarthomecloud.services.alerts import raise_alert
from smarthomecloud.services.audio_detection import analyze_audio, generate_alert_description
from smarthomecloud.services.auth import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/audio", tags=["audio"])


@router.post("/analyze", response_model=AudioAnalyzeResponse, status_code=201)
async def analyze(
    audio: UploadFile | None = File(default=None),
    deviceId: str | None = Form(default=None),
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    if audio is None or not audio.filename:
        raise HTTPException(400, "No audio file provided")
    if not deviceId:
        raise HTTPException(400, "Device ID is required")

    device = await crud.get_device(db, deviceId)
    if not device:
        raise HTTPException(404, "Device not found")

    if audio.content_type not in settings.audio.allowed_mime_types:
        raise HTTPException(400, "Invalid file type. Only audio files are allowed.")

    data = await audio.read(settings.audio.max_upload_bytes + 1)
    if len(data) > settings.audio.max_upload_bytes:
        raise HTTPException(413, "Audio file too large")

    house = await crud.get_house(db, device.house_id)
    location = f"{device.room or 'Unknown Room'} - {house.name if house else 'Unknown House'}"

    analysis = analyze_audio(audio.filename, location)
    detection = await crud.create_audio_detection(
        db,
        device_id=device.id,
        house_id=device.house_id,
        file_name=audio.filename,
        file_size=len(data),
        model_used=analysis.model,
        detected_class=analysis.detected_class,
        confidence=analysis.confidence,
        predictions=analysis.predictions_json(),
        alert_generated=analysis.should_generate_alert,
    )

    alert = None
    if analysis.should_generate_alert:
        alert = await raise_alert(
            db,
            house_id=device.house_id,
            device_id=device.id,
            type=analysis.alert_type,
            severity=analysis.alert_severity,
            title=analysis.alert_message,
            description=generate_alert_description(
                analysis.detected_class, analysis.confidence, device.name, location,
            ),
            location=location,
            ai_confidence=analysis.confidence,
            ai_details=analysis.predictions_json(),
        )
        detection = await crud.update_audio_detection(db, detection, alert_id=alert.id)

    logger.info(
        "Audio %s from device %s classified as %s (%.2f)",
        audio.filename, device.id, analysis.detected_class, analysis.confidence,
    )
    return AudioAnalyzeResponse(
        detection=AudioDetectionRead.model_validate(detection),
        analysis=analysis.to_dict(),
        alert=AlertRead.model_validate(alert) if alert else None,
    )


@router.get("/detections", response_model=list[AudioDetectionRead])
async def list_detections(
    limit: int = Query(default=50, ge=1, le=500),
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await crud.list_audio_detections(db, limit=limit)


@router.get("/detections/device/{device_id}", response_model=list[AudioDetectionRead])
async def list_device_detections(
    device_id: str,
    limit: int = Query(default=20, ge=1, le=500),
    auth: AuthContext = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    if not await crud.get_device(db, device_id):
        raise HTTPException(404, "Device not found")
    return await crud.list_audio_detections(db, device_id=device_id, limit=limit)
