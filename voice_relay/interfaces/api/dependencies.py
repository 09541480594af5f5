"""FastAPI dependency utilities."""

from fastapi import Depends, Request

from voice_relay.application.use_cases.notifications import NotificationDispatcher
from voice_relay.config import Settings
from voice_relay.infrastructure.notifications import RealtimeBroadcaster
from voice_relay.infrastructure.rate_limiter import RateLimitExceededError, RateLimiter
from voice_relay.infrastructure.speech import SpeechSynthesizer


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""

    return request.app.state.settings


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def get_broadcaster(request: Request) -> RealtimeBroadcaster:
    return request.app.state.broadcaster


def get_synthesizer(request: Request) -> SpeechSynthesizer:
    return request.app.state.synthesizer


def get_rate_limiter(request: Request) -> RateLimiter:
    return request.app.state.rate_limiter


def resolve_origin_key(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Return the identifier used to bucket rate limiting for ``request``.

    ``X-Forwarded-For`` is client controlled, so it is only honoured when the
    server runs behind a proxy that overwrites it.
    """

    if trust_forwarded_for:
        forwarded_for = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded_for.split(",", 1)[0].strip()
        if first_hop:
            return first_hop
    if request.client is not None:
        return request.client.host
    return "unknown"


def enforce_rate_limit(
    request: Request,
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Reject the request when its origin exhausted the current window."""

    origin_key = resolve_origin_key(
        request, trust_forwarded_for=settings.trust_forwarded_for
    )
    if not rate_limiter.allow(origin_key):
        raise RateLimitExceededError(origin_key)
