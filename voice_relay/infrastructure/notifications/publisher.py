"""Serialization of notification events for websocket subscribers."""

from __future__ import annotations

import json
from typing import Any

from voice_relay.domain.entities import EVENT_TYPE_WELCOME, NotificationEvent
from voice_relay.utils import now_in_utc, to_iso_timestamp

WELCOME_MESSAGE = "Connected to voice notification server"


def serialize_event(event: NotificationEvent) -> dict[str, Any]:
    """Return the websocket payload representation for ``event``."""

    return {
        "type": event.type,
        "title": event.title,
        "message": event.message,
        "voice_enabled": event.voice_enabled,
        "voice_id": event.voice_id,
        "audio": event.audio,
        "timestamp": to_iso_timestamp(event.timestamp),
    }


def build_welcome_message() -> dict[str, Any]:
    return {
        "type": EVENT_TYPE_WELCOME,
        "message": WELCOME_MESSAGE,
        "timestamp": to_iso_timestamp(now_in_utc()),
    }


def encode_message(message: dict[str, Any]) -> str:
    """Encode ``message`` as compact JSON text."""

    return json.dumps(message, separators=(",", ":"))


__all__ = ["build_welcome_message", "encode_message", "serialize_event"]
