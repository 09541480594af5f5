"""Domain entities describing notifications flowing through the relay."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

EVENT_TYPE_WELCOME = "welcome"
EVENT_TYPE_NOTIFICATION = "notification"


@dataclass(frozen=True)
class NotificationRequest:
    """Notification asked for by a caller, before validation."""

    title: str
    message: str
    voice_enabled: bool = True
    voice_id: str | None = None


@dataclass(frozen=True)
class NotificationEvent:
    """Event pushed to realtime clients for a single dispatch."""

    title: str
    message: str
    voice_enabled: bool
    timestamp: datetime
    voice_id: str | None = None
    audio: str | None = None
    type: str = EVENT_TYPE_NOTIFICATION

    @property
    def has_audio(self) -> bool:
        return self.audio is not None


__all__ = [
    "EVENT_TYPE_NOTIFICATION",
    "EVENT_TYPE_WELCOME",
    "NotificationEvent",
    "NotificationRequest",
]
