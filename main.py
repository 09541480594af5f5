import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from voice_relay.application.use_cases.notifications import NotificationDispatcher
from voice_relay.config import Settings, get_settings
from voice_relay.infrastructure.audio_player import LocalAudioPlayer
from voice_relay.infrastructure.desktop import DesktopNotifier
from voice_relay.infrastructure.notifications import RealtimeBroadcaster
from voice_relay.infrastructure.rate_limiter import RateLimitExceededError, RateLimiter
from voice_relay.infrastructure.speech import SpeechSynthesizer
from voice_relay.interfaces.api.middleware import CORS_HEADERS, PermissiveCORSMiddleware
from voice_relay.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the effective configuration once the server starts."""

    settings: Settings = app.state.settings
    logger.info("Voice relay listening on port %s", settings.port)
    if not settings.api_key_configured:
        logger.warning("ELEVENLABS_API_KEY not set; notifications will be sent without audio")
    yield


async def _rate_limit_exceeded(request: Request, exc: RateLimitExceededError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"status": "error", "message": str(exc)},
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the CORS middleware, so the headers are added here.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "error", "message": "Internal server error"},
        headers=CORS_HEADERS,
    )


def build_services(app: FastAPI, settings: Settings) -> None:
    """Create the shared services and attach them to ``app.state``."""

    broadcaster = RealtimeBroadcaster()
    synthesizer = SpeechSynthesizer.from_settings(settings)
    desktop_notifier = DesktopNotifier(timeout=settings.process_timeout_seconds)
    audio_player = (
        LocalAudioPlayer(timeout=settings.process_timeout_seconds)
        if settings.local_playback_enabled
        else None
    )

    app.state.settings = settings
    app.state.broadcaster = broadcaster
    app.state.synthesizer = synthesizer
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
        max_entries=settings.rate_limit_max_entries,
    )
    app.state.dispatcher = NotificationDispatcher(
        synthesizer=synthesizer,
        broadcaster=broadcaster,
        desktop_notifier=desktop_notifier,
        audio_player=audio_player,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="Voice Relay", lifespan=lifespan)
    build_services(app, settings or get_settings())

    app.add_middleware(PermissiveCORSMiddleware)
    app.add_exception_handler(RateLimitExceededError, _rate_limit_exceeded)
    app.add_exception_handler(Exception, _unhandled_error)

    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings: Settings = app.state.settings
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)
