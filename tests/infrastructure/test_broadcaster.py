"""Tests for the realtime websocket broadcaster."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from conftest import FakeClient
from voice_relay.domain.entities import NotificationEvent
from voice_relay.infrastructure.notifications import RealtimeBroadcaster

pytestmark = pytest.mark.anyio


def _event(title: str = "Build") -> NotificationEvent:
    return NotificationEvent(
        title=title,
        message="Done",
        voice_enabled=False,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


async def _registered(broadcaster: RealtimeBroadcaster, client: FakeClient) -> FakeClient:
    await broadcaster.register(client)
    client.sent.clear()
    return client


async def test_register_sends_welcome_event() -> None:
    broadcaster = RealtimeBroadcaster()
    client = FakeClient()

    await broadcaster.register(client)

    welcome = json.loads(client.sent[0])
    assert welcome["type"] == "welcome"
    assert welcome["timestamp"].endswith("Z")
    assert broadcaster.connection_count == 1


async def test_register_drops_client_when_welcome_fails() -> None:
    broadcaster = RealtimeBroadcaster()

    await broadcaster.register(FakeClient(fail=True))

    assert broadcaster.connection_count == 0


async def test_unregister_is_idempotent() -> None:
    broadcaster = RealtimeBroadcaster()
    client = await _registered(broadcaster, FakeClient())

    await broadcaster.unregister(client)
    await broadcaster.unregister(client)
    await broadcaster.unregister(FakeClient())

    assert broadcaster.connection_count == 0


async def test_failing_client_is_pruned_without_affecting_others() -> None:
    broadcaster = RealtimeBroadcaster()
    first = await _registered(broadcaster, FakeClient())
    second = await _registered(broadcaster, FakeClient())
    third = await _registered(broadcaster, FakeClient())
    second.fail = True

    delivered = await broadcaster.broadcast(_event("one"))

    assert delivered == 2
    assert len(first.sent) == 1
    assert len(third.sent) == 1
    assert second.sent == []
    assert broadcaster.connection_count == 2

    second.fail = False
    await broadcaster.broadcast(_event("two"))

    assert [json.loads(frame)["title"] for frame in first.sent] == ["one", "two"]
    assert [json.loads(frame)["title"] for frame in third.sent] == ["one", "two"]
    assert second.sent == []


async def test_broadcast_serializes_event_once_for_all_clients() -> None:
    broadcaster = RealtimeBroadcaster()
    clients = [await _registered(broadcaster, FakeClient()) for _ in range(3)]

    await broadcaster.broadcast(_event())

    frames = {client.sent[0] for client in clients}
    assert len(frames) == 1
    payload = json.loads(frames.pop())
    assert payload == {
        "type": "notification",
        "title": "Build",
        "message": "Done",
        "voice_enabled": False,
        "voice_id": None,
        "audio": None,
        "timestamp": "2024-05-01T12:00:00.000Z",
    }


async def test_broadcast_without_clients_delivers_nothing() -> None:
    assert await RealtimeBroadcaster().broadcast(_event()) == 0
