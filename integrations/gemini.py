from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from config.settings import Settings
from integrations.core.prompt import build_summary_prompt
from integrations.errors import ProviderError, ProviderNotConfigured


logger = logging.getLogger(__name__)

PROVIDER = "gemini"


def _first_candidate_text(result: Dict[str, Any]) -> Optional[str]:
    candidates = result.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    for part in parts:
        if isinstance(part, dict) and isinstance(part.get("text"), str) and part["text"].strip():
            return part["text"].strip()
    return None


def _upstream_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:300] or response.reason_phrase
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return json.dumps(body)[:300]


class GeminiSummarizer:
    """Summarizes post text with the Gemini generateContent endpoint."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._settings.gemini_api_key)

    def build_request(self, text: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": build_summary_prompt(text)}]}]}

    async def summarize(self, text: str) -> str:
        settings = self._settings
        if not settings.gemini_api_key:
            raise ProviderNotConfigured(PROVIDER, "GEMINI_API_KEY")

        url = f"{settings.gemini_api_base.rstrip('/')}/models/{settings.gemini_model}:generateContent"
        headers = {"x-goog-api-key": settings.gemini_api_key}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(url, json=self.build_request(text), headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER, f"Gemini request failed: {exc}") from exc

        if response.is_error:
            raise ProviderError(
                PROVIDER,
                f"Gemini returned {response.status_code}: {_upstream_message(response)}",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise ProviderError(PROVIDER, "Gemini returned a non-JSON body") from exc

        logger.info("Gemini raw result: %s", json.dumps(result))

        summary = _first_candidate_text(result) if isinstance(result, dict) else None
        if not summary:
            raise ProviderError(PROVIDER, "Gemini response contained no candidate text")
        return summary
