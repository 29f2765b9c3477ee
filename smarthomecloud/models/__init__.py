"""SQLAlchemy ORM models."""

from smarthomecloud.models.base import Base
from smarthomecloud.models.user import User, UserSession, PasswordReset
from smarthomecloud.models.house import House
from smarthomecloud.models.device import Device
from smarthomecloud.models.alert import Alert
from smarthomecloud.models.automation_rule import AutomationRule
from smarthomecloud.models.sensor_reading import SensorReading
from smarthomecloud.models.surveillance_feed import SurveillanceFeed
from smarthomecloud.models.config_change_log import ConfigChangeLog
from smarthomecloud.models.maintenance_record import MaintenanceRecord
from smarthomecloud.models.audio_detection import AudioDetection

__all__ = [
    "Base",
    "User", "UserSession", "PasswordReset",
    "House", "Device", "Alert", "AutomationRule",
    "SensorReading", "SurveillanceFeed", "ConfigChangeLog",
    "MaintenanceRecord", "AudioDetection",
]
