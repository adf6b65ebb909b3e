from feed.client import FeedApiClient, SpeechUnavailable, local_summary
from feed.models import Post, PostStatus, PostType
from feed.orchestrator import FeedOrchestrator
from feed.playback import AudioPlayer, FileAudioPlayer, LoggingSpeechSynthesizer, SpeechSynthesizer
from feed.store import FeedStore

__all__ = [
    "AudioPlayer",
    "FeedApiClient",
    "FeedOrchestrator",
    "FeedStore",
    "FileAudioPlayer",
    "LoggingSpeechSynthesizer",
    "Post",
    "PostStatus",
    "PostType",
    "SpeechSynthesizer",
    "SpeechUnavailable",
    "local_summary",
]
