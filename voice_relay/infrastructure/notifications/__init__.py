"""Realtime notification helpers for the infrastructure layer."""

from .manager import RealtimeBroadcaster, RealtimeClient
from .publisher import build_welcome_message, encode_message, serialize_event

__all__ = [
    "RealtimeBroadcaster",
    "RealtimeClient",
    "build_welcome_message",
    "encode_message",
    "serialize_event",
]
