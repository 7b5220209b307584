from datetime import datetime
from typing import List

from pydantic import BaseModel

from threadboard.core.models import DisplayResponse, ThreadWithResponses

LATEST_LINK_COUNT = 50
FIRST_PAGE_END = 100


class ResponseOut(BaseModel):
    response_number: int
    author_name: str
    is_sage: bool
    posted_at: datetime
    formatted_timestamp: str
    hash_id: str
    content: str
    anchor: str

    @classmethod
    def from_display(cls, display: DisplayResponse) -> "ResponseOut":
        resp = display.response
        return cls(
            response_number=resp.response_number,
            author_name=display.display_author_name,
            is_sage=display.is_sage,
            posted_at=resp.posted_at,
            formatted_timestamp=display.formatted_timestamp,
            hash_id=resp.hash_id,
            content=resp.content,
            anchor=f"{resp.thread_id}-{resp.response_number}",
        )


class ThreadLinks(BaseModel):
    all: str
    latest: str
    first_page: str
    new_responses: str


class ThreadOut(BaseModel):
    thread_id: int
    title: str
    response_count: int
    responses: List[ResponseOut]
    links: ThreadLinks

    @classmethod
    def from_aggregate(cls, aggregate: ThreadWithResponses) -> "ThreadOut":
        thread = aggregate.thread
        base = f"/threads/{thread.thread_id}"
        # Falls back to the thread's newest response when the window is empty
        last = aggregate.last_response_number or thread.response_count
        return cls(
            thread_id=thread.thread_id,
            title=thread.title,
            response_count=thread.response_count,
            responses=[ResponseOut.from_display(r) for r in aggregate.responses],
            links=ThreadLinks(
                all=base,
                latest=f"{base}/l{LATEST_LINK_COUNT}",
                first_page=f"{base}/1-{FIRST_PAGE_END}",
                new_responses=f"{base}/{last}-",
            ),
        )


class ErrorOut(BaseModel):
    kind: str
    message: str
