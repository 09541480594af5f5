"""Websocket endpoint streaming notification events."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from voice_relay.infrastructure.notifications import RealtimeBroadcaster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Register the client for broadcasts until it disconnects."""

    broadcaster: RealtimeBroadcaster = websocket.app.state.broadcaster

    await websocket.accept()
    await broadcaster.register(websocket)
    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                break
            text = frame.get("text")
            if text is None:
                continue
            try:
                message = json.loads(text)
            except json.JSONDecodeError:
                continue

            if isinstance(message, dict) and message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
    except WebSocketDisconnect:
        pass
    except Exception:  # pragma: no cover - protocol errors from the peer
        logger.exception("Realtime connection failed")
    finally:
        await broadcaster.unregister(websocket)
