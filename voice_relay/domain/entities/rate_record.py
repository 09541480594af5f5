"""Domain entity tracking request counts for a single origin."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RateRecord:
    """Requests seen from an origin inside the current window."""

    count: int
    window_reset_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.window_reset_at


__all__ = ["RateRecord"]
