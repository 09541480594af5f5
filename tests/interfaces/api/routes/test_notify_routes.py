"""Integration tests for the HTTP and websocket gateway."""

from __future__ import annotations

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from conftest import FakeRunner
from main import create_app
from voice_relay.application.use_cases.notifications import NotificationDispatcher
from voice_relay.config import Settings
from voice_relay.infrastructure.desktop import DesktopNotifier


def _settings(**overrides) -> Settings:
    values = {"elevenlabs_api_key": None, "port": 9999, "rate_limit_max_requests": 10}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def notifier_runner() -> FakeRunner:
    return FakeRunner(working={"notify-send"})


@pytest.fixture()
def app(notifier_runner: FakeRunner):
    application = create_app(_settings())
    application.state.dispatcher = NotificationDispatcher(
        synthesizer=application.state.synthesizer,
        broadcaster=application.state.broadcaster,
        desktop_notifier=DesktopNotifier(runner=notifier_runner),
    )
    return application


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def test_notify_without_voice_broadcasts_event_without_audio(client: TestClient, notifier_runner) -> None:
    with client.websocket_connect("/ws") as websocket:
        assert websocket.receive_json()["type"] == "welcome"

        response = client.post(
            "/notify", json={"title": "Build", "message": "Done", "voice_enabled": False}
        )

        assert response.status_code == 200
        assert response.json() == {"status": "success", "message": "Notification sent"}
        event = websocket.receive_json()

    assert event["type"] == "notification"
    assert event["title"] == "Build"
    assert event["message"] == "Done"
    assert event["voice_enabled"] is False
    assert event["audio"] is None
    assert notifier_runner.calls[-1][-2:] == ("Build", "Done")


def test_notify_applies_defaults_to_empty_body(client: TestClient) -> None:
    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        response = client.post("/notify")
        event = websocket.receive_json()

    assert response.status_code == 200
    assert event["title"] == "PAI Notification"
    assert event["message"] == "Task completed"
    assert event["voice_enabled"] is True


def test_voice_id_is_preferred_over_voice_name(client: TestClient) -> None:
    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        client.post("/notify", json={"voice_name": "alias", "voice_id": "primary"})
        first = websocket.receive_json()
        client.post("/notify", json={"voice_name": "alias"})
        second = websocket.receive_json()

    assert first["voice_id"] == "primary"
    assert second["voice_id"] == "alias"


def test_pai_forces_voice_and_default_title(client: TestClient) -> None:
    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        response = client.post(
            "/pai", json={"message": "Hello", "voice_enabled": False, "voice_id": "x"}
        )
        event = websocket.receive_json()

    assert response.status_code == 200
    assert event["title"] == "PAI Assistant"
    assert event["voice_enabled"] is True
    assert event["voice_id"] is None


def test_too_long_message_is_rejected(client: TestClient) -> None:
    response = client.post("/notify", json={"message": "a" * 600})

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert "too long" in body["message"]


@pytest.mark.parametrize(
    "payload",
    [{"title": "x; rm -rf /"}, {"message": "$(whoami)"}, {"title": 42}, {"voice_enabled": "yes"}],
)
def test_unsafe_or_mistyped_input_is_rejected(client: TestClient, payload) -> None:
    response = client.post("/notify", json=payload)

    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_malformed_json_is_rejected(client: TestClient) -> None:
    response = client.post(
        "/notify", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Invalid JSON body"}


def test_eleventh_request_is_rate_limited(client: TestClient) -> None:
    for _ in range(10):
        assert client.post("/notify", json={"voice_enabled": False}).status_code == 200

    response = client.post("/notify", json={"voice_enabled": False})

    assert response.status_code == 429
    assert response.json() == {"status": "error", "message": "Rate limit exceeded"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_rotating_forwarded_for_does_not_bypass_rate_limit(client: TestClient) -> None:
    for index in range(10):
        response = client.post(
            "/notify",
            json={"voice_enabled": False},
            headers={"X-Forwarded-For": f"10.0.0.{index}"},
        )
        assert response.status_code == 200

    response = client.post(
        "/notify", json={"voice_enabled": False}, headers={"X-Forwarded-For": "10.0.0.99"}
    )

    assert response.status_code == 429


def test_forwarded_for_keys_rate_limit_when_trusted(notifier_runner: FakeRunner) -> None:
    application = create_app(_settings(trust_forwarded_for=True, rate_limit_max_requests=1))
    application.state.dispatcher = NotificationDispatcher(
        synthesizer=application.state.synthesizer,
        broadcaster=application.state.broadcaster,
        desktop_notifier=DesktopNotifier(runner=notifier_runner),
    )
    with TestClient(application) as test_client:
        statuses = [
            test_client.post(
                "/notify",
                json={"voice_enabled": False},
                headers={"X-Forwarded-For": address},
            ).status_code
            for address in ("10.0.0.1", "10.0.0.2", "10.0.0.1")
        ]

    assert statuses == [200, 200, 429]


def test_failure_inside_rate_limit_dependency_returns_json_error(app) -> None:
    class BrokenLimiter:
        def allow(self, origin_key):
            raise RuntimeError("table corrupted")

    app.state.rate_limiter = BrokenLimiter()

    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.post("/notify", json={})

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Internal server error"}
    assert response.headers["access-control-allow-origin"] == "*"


def test_unexpected_failure_returns_generic_error(app, client: TestClient) -> None:
    class ExplodingDispatcher:
        async def dispatch(self, request):
            raise RuntimeError("kaboom")

    app.state.dispatcher = ExplodingDispatcher()

    response = client.post("/notify", json={})

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Internal server error"}


def test_health_reports_configuration(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "port": 9999,
        "voice_system": "ElevenLabs",
        "model": "eleven_multilingual_v2",
        "default_voice_id": "21m00Tcm4TlvDQ8ikWAM",
        "api_key_configured": False,
        "connected_clients": 0,
    }
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"


def test_options_returns_no_content_with_cors_headers(client: TestClient) -> None:
    for path in ("/notify", "/anything/else"):
        response = client.options(path)

        assert response.status_code == 204
        assert response.headers["access-control-allow-origin"] == "*"


def test_index_serves_placeholder_without_static_dir(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert "/ws" in response.text


def test_index_serves_static_page(tmp_path) -> None:
    (tmp_path / "index.html").write_text("<h1>client page</h1>")
    with TestClient(create_app(_settings(static_dir=str(tmp_path)))) as test_client:
        response = test_client.get("/")

    assert "client page" in response.text


def test_websocket_answers_ping_and_unregisters_on_close(app, client: TestClient) -> None:
    with client.websocket_connect("/ws") as websocket:
        websocket.receive_json()
        assert app.state.broadcaster.connection_count == 1
        websocket.send_text("not json")
        websocket.send_bytes(b"\x00\x01binary")
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

    assert client.get("/health").json()["connected_clients"] == 0
