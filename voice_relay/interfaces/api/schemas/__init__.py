from .notification import (
    DEFAULT_MESSAGE,
    DEFAULT_NOTIFY_TITLE,
    DEFAULT_PAI_TITLE,
    HealthResponse,
    NotifyRequest,
    StatusResponse,
)

__all__ = [
    "DEFAULT_MESSAGE",
    "DEFAULT_NOTIFY_TITLE",
    "DEFAULT_PAI_TITLE",
    "HealthResponse",
    "NotifyRequest",
    "StatusResponse",
]
