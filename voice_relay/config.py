"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

DEFAULT_VOICE_ID = "21m00Tcm4TlvDQ8ikWAM"
DEFAULT_MODEL = "eleven_multilingual_v2"
DEFAULT_PORT = 8888


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    elevenlabs_api_key: str | None = Field(
        default=None,
        description="ElevenLabs API key; speech synthesis is skipped when missing",
    )
    elevenlabs_voice_id: str = Field(
        default=DEFAULT_VOICE_ID,
        description="Voice used when a request does not name one",
        min_length=1,
    )
    elevenlabs_model: str = Field(
        default=DEFAULT_MODEL,
        description="ElevenLabs model identifier sent with every synthesis request",
        min_length=1,
    )
    elevenlabs_base_url: str = Field(
        default="https://api.elevenlabs.io/v1",
        description="Base URL of the ElevenLabs REST API",
        min_length=1,
    )
    host: str = Field(default="127.0.0.1", description="Interface the server binds to")
    port: int = Field(default=DEFAULT_PORT, description="Listening port", gt=0, lt=65536)
    tts_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout applied to every call to the speech provider",
        gt=0,
    )
    process_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout applied to each audio player or notifier attempt",
        gt=0,
    )
    local_playback_enabled: bool = Field(
        default=False,
        description="Play synthesized audio on the host in addition to broadcasting it",
    )
    rate_limit_max_requests: int = Field(
        default=10, description="Requests allowed per origin and window", gt=0
    )
    rate_limit_window_seconds: float = Field(
        default=60.0, description="Length of the rate limiting window", gt=0
    )
    rate_limit_max_entries: int = Field(
        default=10_000,
        description="Number of tracked origins before expired windows are purged",
        gt=0,
    )
    trust_forwarded_for: bool = Field(
        default=False,
        description="Key rate limiting on X-Forwarded-For; enable only behind a trusted proxy",
    )
    static_dir: str | None = Field(
        default=None, description="Directory holding the client page served at /"
    )
    log_level: str = Field(default="INFO", description="Root logging level")

    @property
    def api_key_configured(self) -> bool:
        return bool(self.elevenlabs_api_key)


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
