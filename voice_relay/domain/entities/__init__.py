"""Domain entities exposed by the application."""

from .notification import (
    EVENT_TYPE_NOTIFICATION,
    EVENT_TYPE_WELCOME,
    NotificationEvent,
    NotificationRequest,
)
from .rate_record import RateRecord

__all__ = [
    "EVENT_TYPE_NOTIFICATION",
    "EVENT_TYPE_WELCOME",
    "NotificationEvent",
    "NotificationRequest",
    "RateRecord",
]
