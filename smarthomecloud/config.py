"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


class SessionConfig(BaseModel):
    cookie_name: str = "session_token"
    max_age_days: int = 7
    oauth_state_cookie: str = "oauth_state"


class OAuthProviderConfig(BaseModel):
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.client_id and self.client_secret)


class OIDCProviderConfig(OAuthProviderConfig):
    issuer_url: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.issuer_url and self.client_id and self.client_secret)


class OAuthConfig(BaseModel):
    google: OAuthProviderConfig = Field(default_factory=OAuthProviderConfig)
    github: OAuthProviderConfig = Field(default_factory=OAuthProviderConfig)
    oidc: OIDCProviderConfig = Field(default_factory=OIDCProviderConfig)


class AudioConfig(BaseModel):
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: list[str] = Field(default_factory=lambda: [
        "audio/wav", "audio/wave", "audio/x-wav", "audio/mpeg",
        "audio/mp3", "audio/ogg", "audio/webm", "audio/flac",
    ])


class DeviceMonitorConfig(BaseModel):
    enabled: bool = True
    interval_seconds: int = 60
    offline_after_minutes: int = 15
    low_battery_threshold: int = 20
    temperature_min: float = 45.0
    temperature_max: float = 90.0


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/smarthomecloud.db"
    log_level: str = "INFO"
    app_url: str = "http://localhost:8000"
    resend_api_key: str = ""
    email_from: str = "SmartHomeCloud <noreply@smarthomecloud.local>"
    fernet_key: str = ""
    session: SessionConfig = Field(default_factory=SessionConfig)
    oauth: OAuthConfig = Field(default_factory=OAuthConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    device_monitor: DeviceMonitorConfig = Field(default_factory=DeviceMonitorConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # env and .env win over config.yaml, which wins over field defaults
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=_CONFIG_PATH),
            file_secret_settings,
        )


@lru_cache
def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides."""
    return Settings()
