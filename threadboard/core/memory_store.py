from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from threadboard.core.errors import ThreadNotFound
from threadboard.core.models import NewPost, Response, ResponseNumber, ThreadId, ThreadMeta
from threadboard.core.query import All, Latest, Range, RetrievalSpec, Single
from threadboard.core.response_store import clamp_range
from threadboard.core.windowing import is_sage


@dataclass
class _StoredThread:
    meta: ThreadMeta
    responses: List[Response] = field(default_factory=list)


class InMemoryResponseStore:
    """Process-local store with the same semantics as PostgresResponseStore."""

    def __init__(self):
        self._lock = threading.Lock()
        self._threads: Dict[ThreadId, _StoredThread] = {}
        self._next_thread_id = 1

    def _get(self, thread_id: ThreadId) -> _StoredThread:
        stored = self._threads.get(thread_id)
        if stored is None:
            raise ThreadNotFound(thread_id)
        return stored

    def fetch_thread_meta(self, thread_id: ThreadId) -> ThreadMeta:
        with self._lock:
            return self._get(thread_id).meta

    def fetch_responses(
        self, thread_id: ThreadId, spec: RetrievalSpec
    ) -> Tuple[ThreadMeta, List[Response]]:
        with self._lock:
            stored = self._get(thread_id)
            meta = stored.meta
            responses = list(stored.responses)

        if isinstance(spec, Latest):
            if spec.count == 0:
                return meta, []
            return meta, responses[-spec.count:]

        if isinstance(spec, Single):
            return meta, [r for r in responses if r.response_number == spec.number]

        if isinstance(spec, Range):
            start, end = clamp_range(spec, meta)
            return meta, [r for r in responses if start <= r.response_number <= end]

        if isinstance(spec, All):
            return meta, responses

        raise TypeError(f"Unsupported retrieval spec: {spec!r}")

    def reserve_thread_id(self) -> ThreadId:
        with self._lock:
            return self._reserve()

    def _reserve(self) -> ThreadId:
        thread_id = ThreadId(self._next_thread_id)
        self._next_thread_id += 1
        return thread_id

    def create_thread(
        self, title: str, post: NewPost, thread_id: Optional[ThreadId] = None
    ) -> ThreadMeta:
        with self._lock:
            if thread_id is None:
                thread_id = self._reserve()

            meta = ThreadMeta(
                thread_id=thread_id,
                title=title,
                response_count=0,
                created_at=post.posted_at,
                bumped_at=post.posted_at,
            )
            stored = _StoredThread(meta=meta)
            self._threads[thread_id] = stored
            self._append(stored, post)
            return stored.meta

    def append_response(self, thread_id: ThreadId, post: NewPost) -> Response:
        with self._lock:
            return self._append(self._get(thread_id), post)

    def _append(self, stored: _StoredThread, post: NewPost) -> Response:
        number = ResponseNumber(len(stored.responses) + 1)
        response = Response(
            thread_id=stored.meta.thread_id,
            response_number=number,
            author_name=post.author_name,
            mail=post.mail,
            posted_at=post.posted_at,
            hash_id=post.hash_id,
            content=post.content,
        )
        stored.responses.append(response)

        bumped_at = stored.meta.bumped_at
        if not is_sage(post.mail):
            bumped_at = post.posted_at
        stored.meta = replace(stored.meta, response_count=number, bumped_at=bumped_at)
        return response
