"""Enumerated column values shared by request/response schemas."""

from __future__ import annotations

from typing import Literal

Role = Literal["homeowner", "iot_team", "cloud_staff"]
AuthProvider = Literal["local", "google", "github", "oidc"]

DeviceType = Literal[
    "camera", "microphone", "motion_sensor", "thermostat", "lock", "light", "smoke_detector",
]
DeviceStatus = Literal["online", "offline", "warning"]

AlertType = Literal[
    "motion_detected", "sound_detected", "glass_break", "fall_detected", "scream_detected",
    "device_offline", "low_battery", "temperature_anomaly", "system_anomaly", "intrusion",
]
Severity = Literal["low", "medium", "high", "critical"]
AlertStatus = Literal["new", "acknowledged", "resolved", "dismissed"]

RuleStatus = Literal["active", "inactive"]
SensorDataType = Literal["temperature", "motion", "audio_level", "video_frame", "power_consumption"]

MaintenanceStatus = Literal["scheduled", "in_progress", "completed", "cancelled"]
MaintenanceCategory = Literal["database", "server", "network", "security", "hardware", "software", "other"]

AudioModel = Literal["yamnet", "hubert", "both"]


def not_null(value):
    """Reject an explicit JSON null for a field whose column is NOT NULL."""
    if value is None:
        raise ValueError("cannot be null")
    return value
