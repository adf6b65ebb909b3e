from __future__ import annotations

from typing import Optional


class ProviderNotConfigured(RuntimeError):
    """Raised when a provider credential is missing from the settings."""

    def __init__(self, provider: str, setting: str) -> None:
        super().__init__(f"{setting} is not configured")
        self.provider = provider
        self.setting = setting


class ProviderError(RuntimeError):
    """Raised when a provider call fails or returns something unusable."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
