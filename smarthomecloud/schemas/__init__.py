"""Pydantic request/response schemas."""

from smarthomecloud.schemas.user import (
    RegisterRequest, LoginRequest, UserCreate, UserUpdate, ProfileUpdate,
    PasswordChangeRequest, PasswordForgotRequest, PasswordResetRequest, UserRead,
)
from smarthomecloud.schemas.house import HouseCreate, HouseUpdate, HouseRead
from smarthomecloud.schemas.device import DeviceCreate, DeviceUpdate, DeviceRead
from smarthomecloud.schemas.alert import AlertCreate, AlertRead
from smarthomecloud.schemas.automation_rule import (
    AutomationRuleCreate, AutomationRuleUpdate, AutomationRuleRead,
)
from smarthomecloud.schemas.telemetry import (
    SensorReadingCreate, SensorReadingRead,
    SurveillanceFeedCreate, SurveillanceFeedRead, ConfigChangeLogRead,
)
from smarthomecloud.schemas.maintenance import MaintenanceCreate, MaintenanceUpdate, MaintenanceRead
from smarthomecloud.schemas.audio import AudioDetectionRead, AudioAnalyzeResponse
from smarthomecloud.schemas.ws_messages import WSMessage

__all__ = [
    "RegisterRequest", "LoginRequest", "UserCreate", "UserUpdate", "ProfileUpdate",
    "PasswordChangeRequest", "PasswordForgotRequest", "PasswordResetRequest", "UserRead",
    "HouseCreate", "HouseUpdate", "HouseRead",
    "DeviceCreate", "DeviceUpdate", "DeviceRead",
    "AlertCreate", "AlertRead",
    "AutomationRuleCreate", "AutomationRuleUpdate", "AutomationRuleRead",
    "SensorReadingCreate", "SensorReadingRead",
    "SurveillanceFeedCreate", "SurveillanceFeedRead", "ConfigChangeLogRead",
    "MaintenanceCreate", "MaintenanceUpdate", "MaintenanceRead",
    "AudioDetectionRead", "AudioAnalyzeResponse",
    "WSMessage",
]
