"""Aggregate application use cases."""

from .notifications import NotificationDispatcher

__all__ = ["NotificationDispatcher"]
