from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PostType(str, Enum):
    UPDATE = "update"
    ADVICE = "advice"
    SOIL = "soil"
    CROP = "crop"
    QUESTION = "question"


class PostStatus(str, Enum):
    CREATED = "created"
    SUMMARIZING = "summarizing"
    SUMMARIZED = "summarized"
    ADVICE_PENDING = "advice_pending"
    ADVISED = "advised"
    IDLE = "idle"


class Post(BaseModel):
    id: str
    author: str = "You"
    content: str
    summary: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)
    type: PostType = PostType.UPDATE

    status: PostStatus = PostStatus.CREATED
    playing_audio: bool = False
    # Bookkeeping for the two background calls
    summary_received: bool = False
    advice_received: bool = False

    @property
    def display_text(self) -> str:
        """What the Listen action reads out: the summary when present, else the content."""
        return self.summary or self.content
