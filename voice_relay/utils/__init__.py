"""Utility helpers for the relay."""

from .datetime import now_in_utc, to_iso_timestamp

__all__ = ["now_in_utc", "to_iso_timestamp"]
