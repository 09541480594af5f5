"""Connection management for realtime notification websockets."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, Set

from voice_relay.domain.entities import NotificationEvent

from .publisher import build_welcome_message, encode_message, serialize_event

logger = logging.getLogger(__name__)


class RealtimeClient(Protocol):
    """Connection able to receive text frames, e.g. a Starlette ``WebSocket``."""

    async def send_text(self, data: str) -> None: ...


class RealtimeBroadcaster:
    """Own the set of live websocket clients and fan events out to them."""

    def __init__(self) -> None:
        self._clients: Set[RealtimeClient] = set()
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._clients)

    async def register(self, client: RealtimeClient) -> None:
        """Add an accepted ``client`` and greet it with a welcome event."""

        async with self._lock:
            self._clients.add(client)
        logger.info("Realtime client connected (%s total)", self.connection_count)

        if not await self._send(client, encode_message(build_welcome_message())):
            await self.unregister(client)

    async def unregister(self, client: RealtimeClient) -> None:
        """Remove ``client`` from the live set; unknown clients are ignored."""

        async with self._lock:
            if client not in self._clients:
                return
            self._clients.discard(client)
        logger.info("Realtime client disconnected (%s remaining)", self.connection_count)

    async def broadcast(self, event: NotificationEvent) -> int:
        """Send ``event`` to every live client and return how many received it.

        Clients whose send fails are dropped after the fan-out completes.
        """

        data = encode_message(serialize_event(event))
        async with self._lock:
            snapshot = list(self._clients)
        if not snapshot:
            return 0

        results = await asyncio.gather(*(self._send(client, data) for client in snapshot))
        failed = [client for client, delivered in zip(snapshot, results) if not delivered]
        if failed:
            async with self._lock:
                self._clients.difference_update(failed)
            logger.info("Dropped %s realtime clients after failed send", len(failed))
        return len(snapshot) - len(failed)

    @staticmethod
    async def _send(client: RealtimeClient, data: str) -> bool:
        try:
            await client.send_text(data)
        except Exception as exc:
            logger.debug("Realtime send failed: %s", exc)
            return False
        return True


__all__ = ["RealtimeBroadcaster", "RealtimeClient"]
