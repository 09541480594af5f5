"""Client for the ElevenLabs text-to-speech API."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from voice_relay.config import DEFAULT_MODEL, DEFAULT_VOICE_ID, Settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.elevenlabs.io/v1"
DEFAULT_TIMEOUT_SECONDS = 10.0
VOICE_STABILITY = 0.5
VOICE_SIMILARITY_BOOST = 0.5

_MODEL_SETTING_NAME = "ELEVENLABS_MODEL"


class SpeechSynthesisError(RuntimeError):
    """Base error for every speech synthesis failure."""


class SpeechNotConfiguredError(SpeechSynthesisError):
    """Raised when no provider credential is available."""


class SpeechInvalidModelError(SpeechSynthesisError):
    """Raised when the provider rejects the configured model."""

    def __init__(self, model_id: str, details: str | None = None) -> None:
        message = (
            f"ElevenLabs rejected model '{model_id}'. "
            f"Set {_MODEL_SETTING_NAME} to a model available to your account."
        )
        if details:
            message = f"{message} Provider said: {details}"
        super().__init__(message)
        self.model_id = model_id
        self.details = details


class SpeechProviderError(SpeechSynthesisError):
    """Raised for any other unsuccessful provider interaction."""

    def __init__(self, status_code: int | None, body: str) -> None:
        if status_code is None:
            message = f"ElevenLabs request failed: {body}"
        else:
            message = f"ElevenLabs API responded with status {status_code}: {body}"
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def _extract_error_details(body: str) -> str:
    """Return a human readable description for an ElevenLabs error payload."""

    body = body.strip()
    if not body:
        return ""
    try:
        parsed: Any = json.loads(body)
    except json.JSONDecodeError:
        return body

    if isinstance(parsed, dict):
        detail = parsed.get("detail", parsed)
        if isinstance(detail, dict):
            message = detail.get("message") or detail.get("status")
            if message:
                return str(message)
        elif isinstance(detail, list):
            messages = [
                str(item.get("msg", item)) if isinstance(item, dict) else str(item)
                for item in detail
            ]
            return "; ".join(messages)
        elif detail:
            return str(detail)
    return body


class SpeechSynthesizer:
    """Turn text into speech audio through the ElevenLabs REST API."""

    def __init__(
        self,
        api_key: str | None,
        *,
        default_voice_id: str = DEFAULT_VOICE_ID,
        model_id: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = (api_key or "").strip() or None
        self._default_voice_id = default_voice_id
        self._model_id = model_id
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "SpeechSynthesizer":
        return cls(
            settings.elevenlabs_api_key,
            default_voice_id=settings.elevenlabs_voice_id,
            model_id=settings.elevenlabs_model,
            base_url=settings.elevenlabs_base_url,
            timeout=settings.tts_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None

    @property
    def model_id(self) -> str:
        return self._model_id

    @property
    def default_voice_id(self) -> str:
        return self._default_voice_id

    async def synthesize(self, text: str, voice_id: str | None = None) -> bytes:
        """Return MP3 audio for ``text`` spoken by ``voice_id``.

        Raises :class:`SpeechNotConfiguredError` when no API key is set,
        :class:`SpeechInvalidModelError` when the provider rejects the model and
        :class:`SpeechProviderError` for every other failure, including
        timeouts and connection errors.
        """

        if self._api_key is None:
            raise SpeechNotConfiguredError("ELEVENLABS_API_KEY is not configured")

        voice = voice_id or self._default_voice_id
        url = f"{self._base_url}/text-to-speech/{quote(voice, safe='')}"
        payload = {
            "text": text,
            "model_id": self._model_id,
            "voice_settings": {
                "stability": VOICE_STABILITY,
                "similarity_boost": VOICE_SIMILARITY_BOOST,
            },
        }
        headers = {"xi-api-key": self._api_key, "Accept": "audio/mpeg"}

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise SpeechProviderError(None, str(exc) or type(exc).__name__) from exc

        if response.is_success:
            logger.debug("Synthesized %s bytes of audio with voice %s", len(response.content), voice)
            return response.content

        body = response.text
        details = _extract_error_details(body)
        if response.status_code == httpx.codes.UNPROCESSABLE_ENTITY or "model" in body.lower():
            raise SpeechInvalidModelError(self._model_id, details or None)
        raise SpeechProviderError(response.status_code, details or body)


__all__ = [
    "SpeechInvalidModelError",
    "SpeechNotConfiguredError",
    "SpeechProviderError",
    "SpeechSynthesisError",
    "SpeechSynthesizer",
]
