from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import NewType, Optional, Tuple

ThreadId = NewType("ThreadId", int)
ResponseNumber = NewType("ResponseNumber", int)


@dataclass(frozen=True)
class ThreadMeta:
    thread_id: ThreadId
    title: str
    response_count: int
    created_at: Optional[datetime] = None
    bumped_at: Optional[datetime] = None


@dataclass(frozen=True)
class Response:
    thread_id: ThreadId
    response_number: ResponseNumber
    author_name: Optional[str]
    mail: Optional[str]
    posted_at: datetime
    hash_id: str
    content: str


@dataclass(frozen=True)
class NewPost:
    """A response as submitted, before the store assigns its number."""

    author_name: str
    mail: str
    content: str
    hash_id: str
    posted_at: datetime


@dataclass(frozen=True)
class DisplayResponse:
    response: Response
    is_sage: bool
    display_author_name: str
    formatted_timestamp: str

    @property
    def response_number(self) -> ResponseNumber:
        return self.response.response_number


@dataclass(frozen=True)
class ThreadWithResponses:
    thread: ThreadMeta
    responses: Tuple[DisplayResponse, ...]

    @property
    def last_response_number(self) -> Optional[int]:
        if not self.responses:
            return None
        return self.responses[-1].response_number
