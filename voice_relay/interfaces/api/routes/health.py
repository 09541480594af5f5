from fastapi import APIRouter, Depends

from voice_relay.config import Settings
from voice_relay.infrastructure.notifications import RealtimeBroadcaster
from voice_relay.infrastructure.speech import SpeechSynthesizer
from voice_relay.interfaces.api.dependencies import (
    get_app_settings,
    get_broadcaster,
    get_synthesizer,
)
from voice_relay.interfaces.api.schemas import HealthResponse

VOICE_SYSTEM = "ElevenLabs"

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_app_settings),
    synthesizer: SpeechSynthesizer = Depends(get_synthesizer),
    broadcaster: RealtimeBroadcaster = Depends(get_broadcaster),
) -> HealthResponse:
    return HealthResponse(
        port=settings.port,
        voice_system=VOICE_SYSTEM,
        model=synthesizer.model_id,
        default_voice_id=synthesizer.default_voice_id,
        api_key_configured=synthesizer.is_configured,
        connected_clients=broadcaster.connection_count,
    )
