from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from config.settings import Settings
from integrations.core.canned import canned_advice
from integrations.core.prompt import build_advice_messages
from integrations.errors import ProviderError, ProviderNotConfigured


logger = logging.getLogger(__name__)

PROVIDER = "dedalus"

NOTE_NOT_CONFIGURED = "DEDALUS_API_KEY is not configured; returned offline farming guidance."
NOTE_UPSTREAM_FAILED = "Advice service unavailable; returned offline farming guidance."


@dataclass
class AdviceResult:
    final_output: str
    note: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": True, "final_output": self.final_output}
        if self.note:
            body["note"] = self.note
        return body


def _completion_text(result: Any) -> Optional[str]:
    if not isinstance(result, dict):
        return None
    if isinstance(result.get("final_output"), str) and result["final_output"].strip():
        return result["final_output"].strip()
    choices = result.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    content = (choices[0].get("message") or {}).get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()
    return None


class DedalusAdvisor:
    """Best-effort farming advice.

    ``advise`` always returns usable text: a live answer when the provider is
    configured and responds, otherwise a keyword-matched canned answer.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._settings.dedalus_api_key)

    async def ask(self, prompt: str, model: Optional[str] = None) -> str:
        """Single provider call. Raises on any failure."""
        settings = self._settings
        if not settings.dedalus_api_key:
            raise ProviderNotConfigured(PROVIDER, "DEDALUS_API_KEY")

        payload = {
            "model": model or settings.dedalus_model,
            "messages": build_advice_messages(prompt),
        }
        url = f"{settings.dedalus_api_base.rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {settings.dedalus_api_key}"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=headers)
                response.raise_for_status()
                result = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                PROVIDER,
                f"Dedalus returned {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(PROVIDER, f"Dedalus request failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(PROVIDER, "Dedalus returned a non-JSON body") from exc

        text = _completion_text(result)
        if not text:
            raise ProviderError(PROVIDER, "Dedalus response contained no message content")
        return text

    async def advise(self, prompt: str, model: Optional[str] = None) -> AdviceResult:
        if not self.configured:
            return AdviceResult(canned_advice(prompt), note=NOTE_NOT_CONFIGURED)
        try:
            return AdviceResult(await self.ask(prompt, model=model))
        except ProviderError as exc:
            logger.warning("Advice call failed, using canned response: %s", exc)
            return AdviceResult(canned_advice(prompt), note=NOTE_UPSTREAM_FAILED)
