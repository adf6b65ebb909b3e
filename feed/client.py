from __future__ import annotations

import logging
from typing import Optional

import httpx

from config.settings import Settings, get_settings


logger = logging.getLogger(__name__)

SUMMARY_FALLBACK_LENGTH = 100
NO_SUMMARY = "Unable to generate summary"
NO_ADVICE = "Unable to generate advice"
ADVICE_UNAVAILABLE = "AI advice temporarily unavailable"


class SpeechUnavailable(RuntimeError):
    """The speech proxy did not return audio."""


def local_summary(text: str) -> str:
    if len(text) > SUMMARY_FALLBACK_LENGTH:
        return text[:SUMMARY_FALLBACK_LENGTH] + "..."
    return text


class FeedApiClient:
    """Calls the proxy routes on behalf of the feed.

    ``summarize`` and ``advise`` never raise: failures resolve to local text.
    ``synthesize`` raises ``SpeechUnavailable`` so the caller can fall back to
    on-device speech.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.base_url = (base_url or settings.feed_api_url).rstrip("/")
        self.advice_model = settings.dedalus_model
        self.voice_id = settings.elevenlabs_voice_id
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport)

    async def summarize(self, text: str) -> str:
        try:
            async with self._client() as client:
                response = await client.post("/api/gemini", json={"text": text})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Summary request failed, using local summary: %s", exc)
            return local_summary(text)
        summary = data.get("summary") if isinstance(data, dict) else None
        return summary or NO_SUMMARY

    async def advise(self, prompt: str) -> str:
        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/dedalus",
                    json={"input": prompt, "model": self.advice_model},
                )
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Advice request failed: %s", exc)
            return ADVICE_UNAVAILABLE
        if not isinstance(data, dict):
            return NO_ADVICE
        return data.get("final_output") or data.get("text") or NO_ADVICE

    async def synthesize(self, text: str, voice_id: Optional[str] = None) -> bytes:
        try:
            async with self._client() as client:
                response = await client.post(
                    "/api/elevenlabs-tts",
                    json={"text": text, "voice_id": voice_id or self.voice_id},
                )
        except httpx.HTTPError as exc:
            raise SpeechUnavailable(f"Speech request failed: {exc}") from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = body.get("error") if isinstance(body, dict) else None
            raise SpeechUnavailable(message or f"Speech proxy returned {response.status_code}")
        if not response.content:
            raise SpeechUnavailable("Speech proxy returned no audio")
        return response.content
