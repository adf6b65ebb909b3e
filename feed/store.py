from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

from feed.models import Post, PostStatus, PostType


logger = logging.getLogger(__name__)


class FeedStore:
    """In-memory post list keyed by post id, newest first.

    Posts are only changed through the transition methods below. A transition
    for an id the store does not know is dropped and returns ``None``.

    For question posts advice supersedes the summary: once advice has been
    applied, a summary arriving later is recorded but not displayed.
    """

    def __init__(self) -> None:
        self._posts: Dict[str, Post] = {}
        self._order: List[str] = []

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._posts

    @property
    def posts(self) -> List[Post]:
        return [self._posts[post_id] for post_id in self._order]

    def get(self, post_id: str) -> Optional[Post]:
        return self._posts.get(post_id)

    def next_id(self) -> str:
        candidate = int(time.time() * 1000)
        while str(candidate) in self._posts:
            candidate += 1
        return str(candidate)

    def add(self, post: Post) -> Post:
        if post.id in self._posts:
            raise ValueError(f"Duplicate post id: {post.id}")
        self._posts[post.id] = post
        self._order.insert(0, post.id)
        return post

    def _lookup(self, post_id: str, transition: str) -> Optional[Post]:
        post = self._posts.get(post_id)
        if post is None:
            logger.debug("Dropped %s for unknown post %s", transition, post_id)
        return post

    def begin_summarizing(self, post_id: str) -> Optional[Post]:
        post = self._lookup(post_id, "begin_summarizing")
        if post is not None and post.status == PostStatus.CREATED:
            post.status = PostStatus.SUMMARIZING
        return post

    def begin_advice(self, post_id: str) -> Optional[Post]:
        post = self._lookup(post_id, "begin_advice")
        if post is None:
            return None
        if post.type != PostType.QUESTION:
            raise ValueError(f"Advice is only requested for question posts, got {post.type.value}")
        if not post.advice_received:
            post.status = PostStatus.ADVICE_PENDING
        return post

    def apply_summary(self, post_id: str, summary: str) -> Optional[Post]:
        if not summary or not summary.strip():
            raise ValueError("summary must not be blank")
        post = self._lookup(post_id, "apply_summary")
        if post is None:
            return None
        post.summary_received = True
        if post.advice_received:
            return post
        post.summary = summary
        if post.status in (PostStatus.CREATED, PostStatus.SUMMARIZING):
            post.status = PostStatus.SUMMARIZED
        return post

    def apply_advice(self, post_id: str, advice: str) -> Optional[Post]:
        if not advice or not advice.strip():
            raise ValueError("advice must not be blank")
        post = self._lookup(post_id, "apply_advice")
        if post is None:
            return None
        post.summary = advice
        post.advice_received = True
        post.status = PostStatus.ADVISED
        return post

    def settle(self, post_id: str) -> Optional[Post]:
        post = self._lookup(post_id, "settle")
        if post is not None:
            post.status = PostStatus.IDLE
        return post

    def start_playback(self, post_id: str) -> bool:
        post = self._lookup(post_id, "start_playback")
        if post is None or post.playing_audio:
            return False
        post.playing_audio = True
        return True

    def stop_playback(self, post_id: str) -> Optional[Post]:
        post = self._lookup(post_id, "stop_playback")
        if post is not None:
            post.playing_audio = False
        return post
