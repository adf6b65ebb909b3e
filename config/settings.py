from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here. Values are read when
    the object is built so tests can construct one after patching the
    environment.
    """

    def __init__(self) -> None:
        self.app_env: str = _env("APP_ENV", "development")
        self.log_level: str = _env("LOG_LEVEL", "INFO").upper()

        # Summarization (Gemini)
        self.gemini_api_key: Optional[str] = _env("GEMINI_API_KEY")
        self.gemini_model: str = _env("GEMINI_MODEL", "gemini-2.0-flash")
        self.gemini_api_base: str = _env(
            "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
        )

        # Advice (Dedalus, OpenAI-compatible)
        self.dedalus_api_key: Optional[str] = _env("DEDALUS_API_KEY")
        self.dedalus_model: str = _env("DEDALUS_MODEL", "openai/gpt-5-mini")
        self.dedalus_api_base: str = _env("DEDALUS_API_BASE", "https://api.dedaluslabs.ai/v1")

        # Speech (ElevenLabs)
        self.elevenlabs_api_key: Optional[str] = _env("ELEVENLABS_API_KEY")
        self.elevenlabs_voice_id: str = _env("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")
        self.elevenlabs_model_id: str = _env("ELEVENLABS_MODEL_ID", "eleven_monolingual_v1")
        self.elevenlabs_api_base: str = _env("ELEVENLABS_API_BASE", "https://api.elevenlabs.io/v1")

        # Where the feed client finds the proxy routes
        self.feed_api_url: str = _env("FEED_API_URL", "http://127.0.0.1:8000")

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() in {"dev", "development", "local"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
