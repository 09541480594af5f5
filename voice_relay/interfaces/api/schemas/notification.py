"""Pydantic models describing notification payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr

from voice_relay.domain.entities import NotificationRequest

DEFAULT_NOTIFY_TITLE = "PAI Notification"
DEFAULT_PAI_TITLE = "PAI Assistant"
DEFAULT_MESSAGE = "Task completed"


class NotifyRequest(BaseModel):
    """Body accepted by ``POST /notify`` and ``POST /pai``."""

    model_config = ConfigDict(extra="ignore")

    title: StrictStr | None = Field(default=None, description="Notification title")
    message: StrictStr | None = Field(default=None, description="Notification body")
    voice_enabled: StrictBool | None = Field(
        default=None, description="Synthesize speech unless explicitly false"
    )
    voice_id: StrictStr | None = Field(default=None, description="Provider voice identifier")
    voice_name: StrictStr | None = Field(default=None, description="Alias of ``voice_id``")

    def to_notification(self, *, default_title: str = DEFAULT_NOTIFY_TITLE) -> NotificationRequest:
        """Apply defaults and return the domain request."""

        return NotificationRequest(
            title=self.title if self.title is not None else default_title,
            message=self.message if self.message is not None else DEFAULT_MESSAGE,
            voice_enabled=self.voice_enabled is not False,
            voice_id=self.voice_id if self.voice_id is not None else self.voice_name,
        )

    def to_assistant_notification(self) -> NotificationRequest:
        """Defaults for ``POST /pai``: voice is always on with the default voice."""

        return NotificationRequest(
            title=self.title if self.title is not None else DEFAULT_PAI_TITLE,
            message=self.message if self.message is not None else DEFAULT_MESSAGE,
            voice_enabled=True,
            voice_id=None,
        )


class StatusResponse(BaseModel):
    """Outcome reported for every notification call."""

    status: Literal["success", "error"]
    message: str


class HealthResponse(BaseModel):
    """Liveness and configuration summary."""

    status: Literal["healthy"] = "healthy"
    port: int
    voice_system: str
    model: str
    default_voice_id: str
    api_key_configured: bool
    connected_clients: int


__all__ = [
    "DEFAULT_MESSAGE",
    "DEFAULT_NOTIFY_TITLE",
    "DEFAULT_PAI_TITLE",
    "HealthResponse",
    "NotifyRequest",
    "StatusResponse",
]
