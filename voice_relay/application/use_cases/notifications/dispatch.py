"""End-to-end dispatch of a single notification request."""

from __future__ import annotations

import asyncio
import base64
import logging

from voice_relay.domain.entities import NotificationEvent, NotificationRequest
from voice_relay.infrastructure.audio_player import LocalAudioPlayer, NoPlayerAvailableError
from voice_relay.infrastructure.desktop import DesktopNotifier
from voice_relay.infrastructure.notifications import RealtimeBroadcaster
from voice_relay.infrastructure.speech import (
    SpeechInvalidModelError,
    SpeechSynthesisError,
    SpeechSynthesizer,
)
from voice_relay.utils import now_in_utc

from .validators import ensure_displayable

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Validate, voice and fan out notifications to every delivery channel."""

    def __init__(
        self,
        *,
        synthesizer: SpeechSynthesizer,
        broadcaster: RealtimeBroadcaster,
        desktop_notifier: DesktopNotifier,
        audio_player: LocalAudioPlayer | None = None,
    ) -> None:
        self._synthesizer = synthesizer
        self._broadcaster = broadcaster
        self._desktop_notifier = desktop_notifier
        self._audio_player = audio_player

    async def dispatch(self, request: NotificationRequest) -> NotificationEvent:
        """Deliver ``request`` and return the event that was broadcast.

        Only :class:`InputValidationError` escapes; every delivery problem
        degrades the notification instead of failing it.
        """

        title = ensure_displayable(request.title, "title")
        message = ensure_displayable(request.message, "message")

        audio: bytes | None = None
        if request.voice_enabled and self._synthesizer.is_configured:
            audio = await self._synthesize(message, request.voice_id)

        event = NotificationEvent(
            title=title,
            message=message,
            voice_enabled=request.voice_enabled,
            voice_id=request.voice_id,
            audio=base64.b64encode(audio).decode("ascii") if audio is not None else None,
            timestamp=now_in_utc(),
        )

        deliveries = [
            self._broadcaster.broadcast(event),
            self._desktop_notifier.notify(title, message),
        ]
        if audio is not None and self._audio_player is not None:
            deliveries.append(self._play(audio))
        await asyncio.gather(*deliveries)

        logger.info("Notification dispatched: %s (audio=%s)", title, event.has_audio)
        return event

    async def _synthesize(self, text: str, voice_id: str | None) -> bytes | None:
        try:
            return await self._synthesizer.synthesize(text, voice_id)
        except SpeechInvalidModelError as exc:
            logger.error("%s", exc)
        except SpeechSynthesisError as exc:
            logger.warning("Speech synthesis failed, sending without audio: %s", exc)
        return None

    async def _play(self, audio: bytes) -> None:
        try:
            await self._audio_player.play(audio)
        except NoPlayerAvailableError as exc:
            logger.warning("%s", exc)


__all__ = ["NotificationDispatcher"]
