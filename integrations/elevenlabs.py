from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from config.settings import Settings
from integrations.errors import ProviderError, ProviderNotConfigured


logger = logging.getLogger(__name__)

PROVIDER = "elevenlabs"
DEFAULT_MEDIA_TYPE = "audio/mpeg"


@dataclass
class SpeechAudio:
    content: bytes
    media_type: str = DEFAULT_MEDIA_TYPE


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:300] or response.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict):
        return str(detail.get("message") or detail.get("status") or detail)
    if detail:
        return str(detail)
    return str(body)[:300]


class ElevenLabsSpeech:
    """Text-to-speech through the ElevenLabs REST API. No caching."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._settings.elevenlabs_api_key)

    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> SpeechAudio:
        settings = self._settings
        if not settings.elevenlabs_api_key:
            raise ProviderNotConfigured(PROVIDER, "ELEVENLABS_API_KEY")

        voice = voice_id or settings.elevenlabs_voice_id
        url = f"{settings.elevenlabs_api_base.rstrip('/')}/text-to-speech/{voice}"
        headers = {
            "xi-api-key": settings.elevenlabs_api_key,
            "Accept": DEFAULT_MEDIA_TYPE,
        }
        payload = {
            "text": text,
            "model_id": settings.elevenlabs_model_id,
            "voice_settings": {"stability": 0.5, "similarity_boost": 0.5},
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER, f"ElevenLabs request failed: {exc}") from exc

        if response.is_error:
            raise ProviderError(
                PROVIDER,
                f"ElevenLabs returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )
        if not response.content:
            raise ProviderError(PROVIDER, "ElevenLabs returned an empty audio body")

        media_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not media_type.startswith("audio/"):
            media_type = DEFAULT_MEDIA_TYPE
        logger.info("Synthesized %s bytes of %s with voice %s", len(response.content), media_type, voice)
        return SpeechAudio(content=response.content, media_type=media_type)
