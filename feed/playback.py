from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Protocol


logger = logging.getLogger(__name__)


class AudioPlayer(Protocol):
    async def play(self, audio: bytes) -> None:
        """Play ``audio``; return once playback has ended."""


class SpeechSynthesizer(Protocol):
    async def speak(self, text: str) -> None:
        """Speak ``text`` on the device; return once speaking has ended."""


class FileAudioPlayer:
    """Writes each clip to ``directory`` instead of a sound device."""

    def __init__(self, directory: Path, suffix: str = ".mp3") -> None:
        self.directory = Path(directory)
        self.suffix = suffix
        self.saved: List[Path] = []

    async def play(self, audio: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"clip-{time.time_ns()}{self.suffix}"
        path.write_bytes(audio)
        self.saved.append(path)
        logger.info("Saved %s bytes of audio to %s", len(audio), path)


class LoggingSpeechSynthesizer:
    """Stand-in for an on-device voice: records and logs what it was asked to say."""

    def __init__(self) -> None:
        self.spoken: List[str] = []
        self.last: Optional[str] = None

    async def speak(self, text: str) -> None:
        self.spoken.append(text)
        self.last = text
        logger.info("Local speech: %s", text)
