from integrations.dedalus import AdviceResult, DedalusAdvisor
from integrations.elevenlabs import ElevenLabsSpeech, SpeechAudio
from integrations.errors import ProviderError, ProviderNotConfigured
from integrations.gemini import GeminiSummarizer

__all__ = [
    "AdviceResult",
    "DedalusAdvisor",
    "ElevenLabsSpeech",
    "GeminiSummarizer",
    "ProviderError",
    "ProviderNotConfigured",
    "SpeechAudio",
]
