from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable, Dict, Generator, List

import httpx
import pytest

# Make the flat top-level packages importable without installing
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))


PROVIDER_ENV = (
    "GEMINI_API_KEY",
    "GEMINI_MODEL",
    "GEMINI_API_BASE",
    "DEDALUS_API_KEY",
    "DEDALUS_MODEL",
    "DEDALUS_API_BASE",
    "ELEVENLABS_API_KEY",
    "ELEVENLABS_VOICE_ID",
    "ELEVENLABS_MODEL_ID",
    "ELEVENLABS_API_BASE",
    "FEED_API_URL",
)

FAKE_AUDIO = b"ID3\x03\x00\x00\x00fake-mp3-frames"


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in PROVIDER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_ENV", "test")


@pytest.fixture()
def make_settings(clean_env, monkeypatch: pytest.MonkeyPatch) -> Callable:
    from config.settings import Settings

    def _make(**env: str) -> Settings:
        for name, value in env.items():
            monkeypatch.setenv(name, value)
        return Settings()

    return _make


class FakeProviders:
    """Stands in for Gemini, Dedalus and ElevenLabs behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.gemini_status = 200
        self.gemini_body: Dict = {
            "candidates": [
                {"content": {"parts": [{"text": "Farmer reports early wheat sprouting after rain."}]}}
            ]
        }
        self.dedalus_status = 200
        self.dedalus_body: Dict = {
            "choices": [{"message": {"role": "assistant", "content": "Test the soil pH, then lime."}}]
        }
        self.speech_status = 200
        self.speech_body: bytes = FAKE_AUDIO
        self.speech_content_type = "audio/mpeg"
        self.fail_transport = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_transport:
            raise httpx.ConnectError("connection refused", request=request)
        host = request.url.host
        if "googleapis" in host:
            return httpx.Response(self.gemini_status, json=self.gemini_body)
        if "dedalus" in host:
            return httpx.Response(self.dedalus_status, json=self.dedalus_body)
        if "elevenlabs" in host:
            if self.speech_status >= 400:
                return httpx.Response(
                    self.speech_status,
                    json={"detail": {"status": "invalid_api_key", "message": "Invalid API key"}},
                )
            return httpx.Response(
                self.speech_status,
                content=self.speech_body,
                headers={"content-type": self.speech_content_type},
            )
        return httpx.Response(404, json={"error": "unknown host"})

    def requests_to(self, host_part: str) -> List[httpx.Request]:
        return [r for r in self.requests if host_part in r.url.host]

    def last_json(self, host_part: str) -> Dict:
        return json.loads(self.requests_to(host_part)[-1].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture()
def make_client(providers: FakeProviders) -> Generator:
    from fastapi.testclient import TestClient
    from app.main import create_app

    clients = []

    def _make(settings) -> TestClient:
        client = TestClient(create_app(settings, transport=providers.transport))
        clients.append(client)
        return client

    try:
        yield _make
    finally:
        for client in clients:
            client.close()
