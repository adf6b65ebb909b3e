from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set, Union

from feed.client import FeedApiClient
from feed.models import Post, PostType
from feed.playback import AudioPlayer, LoggingSpeechSynthesizer, SpeechSynthesizer
from feed.store import FeedStore


logger = logging.getLogger(__name__)


class FeedOrchestrator:
    """Drives the community feed: posting, background AI calls and Listen.

    ``submit`` returns as soon as the post is in the store; summarization
    (and advice for questions) run as background tasks, so a new post can be
    submitted while earlier ones are still being processed.
    """

    def __init__(
        self,
        api: FeedApiClient,
        store: Optional[FeedStore] = None,
        player: Optional[AudioPlayer] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
    ) -> None:
        self.api = api
        self.store = store if store is not None else FeedStore()
        self.player = player
        self.synthesizer = synthesizer if synthesizer is not None else LoggingSpeechSynthesizer()
        self._tasks: Set[asyncio.Task] = set()

    async def submit(
        self,
        content: str,
        post_type: Union[PostType, str] = PostType.UPDATE,
        author: str = "You",
    ) -> Post:
        if not content or not content.strip():
            raise ValueError("Post content must not be empty")

        post = self.store.add(
            Post(
                id=self.store.next_id(),
                author=author,
                content=content,
                type=PostType(post_type),
            )
        )
        logger.info("Posted %s (%s, %s chars)", post.id, post.type.value, len(content))

        task = asyncio.create_task(self._process(post.id, content, post.type))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return post

    async def _process(self, post_id: str, content: str, post_type: PostType) -> None:
        self.store.begin_summarizing(post_id)
        calls = [asyncio.create_task(self._summarize(post_id, content))]
        if post_type == PostType.QUESTION:
            self.store.begin_advice(post_id)
            calls.append(asyncio.create_task(self._advise(post_id, content)))

        results = await asyncio.gather(*calls, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.error("Background call for post %s failed: %s", post_id, result)
        self.store.settle(post_id)

    async def _summarize(self, post_id: str, content: str) -> None:
        summary = await self.api.summarize(content)
        self.store.apply_summary(post_id, summary)

    async def _advise(self, post_id: str, content: str) -> None:
        advice = await self.api.advise(content)
        self.store.apply_advice(post_id, advice)

    async def listen(self, post_id: str) -> bool:
        """Read a post aloud.

        Returns False when the post is unknown or already playing. Any failure
        to fetch or play remote audio falls back to local speech.
        """
        post = self.store.get(post_id)
        if post is None or not self.store.start_playback(post_id):
            return False

        text = post.display_text
        try:
            if self.player is not None and await self._play_remote(post_id, text):
                return True
            await self._speak_locally(post_id, text)
        finally:
            self.store.stop_playback(post_id)
        return True

    async def _play_remote(self, post_id: str, text: str) -> bool:
        try:
            audio = await self.api.synthesize(text)
            await self.player.play(audio)
        except Exception as exc:
            logger.warning("Remote speech failed for post %s, speaking locally: %s", post_id, exc)
            return False
        return True

    async def _speak_locally(self, post_id: str, text: str) -> None:
        try:
            await self.synthesizer.speak(text)
        except Exception:
            logger.exception("Local speech failed for post %s", post_id)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await self.wait_idle()
