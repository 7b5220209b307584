from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Tuple

import psycopg
from psycopg.rows import dict_row

from threadboard.core.errors import StorageUnavailable, ThreadNotFound
from threadboard.core.identifiers import MAX_IDENTIFIER
from threadboard.core.models import NewPost, Response, ThreadId, ThreadMeta
from threadboard.core.query import All, Latest, Range, RetrievalSpec, Single
from threadboard.core.windowing import is_sage

logger = logging.getLogger(__name__)

RESPONSE_COLUMNS = """
    thread_id,
    response_number,
    author_name,
    mail,
    posted_at,
    hash_id,
    content
"""


class ResponseStore(Protocol):
    def fetch_thread_meta(self, thread_id: ThreadId) -> ThreadMeta: ...

    def fetch_responses(
        self, thread_id: ThreadId, spec: RetrievalSpec
    ) -> Tuple[ThreadMeta, List[Response]]: ...

    def reserve_thread_id(self) -> ThreadId: ...

    def create_thread(
        self, title: str, post: NewPost, thread_id: Optional[ThreadId] = None
    ) -> ThreadMeta: ...

    def append_response(self, thread_id: ThreadId, post: NewPost) -> Response: ...


def clamp_range(spec: Range, meta: ThreadMeta) -> Tuple[int, int]:
    """Replace open bounds with the first/last response number of the thread."""
    start = 1 if spec.start is None else spec.start
    end = meta.response_count if spec.end is None else spec.end
    return start, end


class PostgresResponseStore:
    def __init__(self, conn: psycopg.Connection):
        self.conn = conn

    # --------------------------------------------------
    # Reads
    # --------------------------------------------------
    def _thread_meta(self, cur, thread_id: ThreadId) -> ThreadMeta:
        cur.execute(
            """
            SELECT
                t.thread_id,
                t.title,
                t.created_at,
                t.bumped_at,
                COUNT(r.response_number) AS response_count
            FROM threads t
            LEFT JOIN responses r ON r.thread_id = t.thread_id
            WHERE t.thread_id = %s
            GROUP BY t.thread_id
            """,
            (thread_id,),
        )
        row = cur.fetchone()
        if not row:
            raise ThreadNotFound(thread_id)
        return ThreadMeta(**row)

    def _window(self, cur, meta: ThreadMeta, spec: RetrievalSpec) -> List[Response]:
        thread_id = meta.thread_id

        if isinstance(spec, Latest):
            if spec.count == 0:
                return []
            cur.execute(
                f"""
                SELECT {RESPONSE_COLUMNS}
                FROM responses
                WHERE thread_id = %s
                ORDER BY response_number DESC
                LIMIT %s
                """,
                (thread_id, min(spec.count, MAX_IDENTIFIER)),
            )
            rows = cur.fetchall()
            rows.reverse()
            return [Response(**row) for row in rows]

        if isinstance(spec, Single):
            cur.execute(
                f"""
                SELECT {RESPONSE_COLUMNS}
                FROM responses
                WHERE thread_id = %s
                  AND response_number = %s
                """,
                (thread_id, spec.number),
            )
            return [Response(**row) for row in cur.fetchall()]

        if isinstance(spec, Range):
            start, end = clamp_range(spec, meta)
            if start > end:
                return []
            cur.execute(
                f"""
                SELECT {RESPONSE_COLUMNS}
                FROM responses
                WHERE thread_id = %s
                  AND response_number BETWEEN %s AND %s
                ORDER BY response_number ASC
                """,
                (thread_id, start, end),
            )
            return [Response(**row) for row in cur.fetchall()]

        if isinstance(spec, All):
            cur.execute(
                f"""
                SELECT {RESPONSE_COLUMNS}
                FROM responses
                WHERE thread_id = %s
                ORDER BY response_number ASC
                """,
                (thread_id,),
            )
            return [Response(**row) for row in cur.fetchall()]

        raise TypeError(f"Unsupported retrieval spec: {spec!r}")

    def fetch_thread_meta(self, thread_id: ThreadId) -> ThreadMeta:
        try:
            with self.conn.cursor(row_factory=dict_row) as cur:
                return self._thread_meta(cur, thread_id)
        except psycopg.Error as e:
            logger.error("Thread lookup failed for %s: %s", thread_id, e)
            raise StorageUnavailable() from e

    def fetch_responses(
        self, thread_id: ThreadId, spec: RetrievalSpec
    ) -> Tuple[ThreadMeta, List[Response]]:
        try:
            # Metadata and window come from the same snapshot
            with self.conn.transaction():
                with self.conn.cursor(row_factory=dict_row) as cur:
                    meta = self._thread_meta(cur, thread_id)
                    return meta, self._window(cur, meta, spec)
        except psycopg.Error as e:
            logger.error(
                "Response fetch failed for thread %s (%s): %s",
                thread_id,
                spec.describe(),
                e,
            )
            raise StorageUnavailable() from e

    # --------------------------------------------------
    # Writes
    # --------------------------------------------------
    def _next_response_number(self, thread_id: ThreadId, cur) -> int:
        # Per-thread transactional lock
        cur.execute("SELECT pg_advisory_xact_lock(%s)", (thread_id,))

        # Safe aggregate AFTER lock
        cur.execute(
            """
            SELECT COALESCE(MAX(response_number), 0) + 1 AS next_response_number
            FROM responses
            WHERE thread_id = %s
            """,
            (thread_id,),
        )
        return cur.fetchone()["next_response_number"]

    def _insert_response(self, cur, thread_id: ThreadId, number: int, post: NewPost) -> Response:
        cur.execute(
            f"""
            INSERT INTO responses (
                thread_id,
                response_number,
                author_name,
                mail,
                posted_at,
                hash_id,
                content
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING {RESPONSE_COLUMNS}
            """,
            (
                thread_id,
                number,
                post.author_name,
                post.mail,
                post.posted_at,
                post.hash_id,
                post.content,
            ),
        )
        return Response(**cur.fetchone())

    def reserve_thread_id(self) -> ThreadId:
        try:
            with self.conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    "SELECT nextval(pg_get_serial_sequence('threads', 'thread_id')) AS thread_id"
                )
                return ThreadId(cur.fetchone()["thread_id"])
        except psycopg.Error as e:
            logger.error("Thread id reservation failed: %s", e)
            raise StorageUnavailable() from e

    def create_thread(
        self, title: str, post: NewPost, thread_id: Optional[ThreadId] = None
    ) -> ThreadMeta:
        try:
            with self.conn.transaction():
                with self.conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        """
                        INSERT INTO threads (thread_id, title, created_at, bumped_at)
                        VALUES (
                            COALESCE(%s, nextval(pg_get_serial_sequence('threads', 'thread_id'))),
                            %s, %s, %s
                        )
                        RETURNING thread_id, title, created_at, bumped_at
                        """,
                        (thread_id, title, post.posted_at, post.posted_at),
                    )
                    row = cur.fetchone()
                    self._insert_response(cur, row["thread_id"], 1, post)
                    return ThreadMeta(response_count=1, **row)
        except psycopg.Error as e:
            logger.error("Thread creation failed: %s", e)
            raise StorageUnavailable() from e

    def append_response(self, thread_id: ThreadId, post: NewPost) -> Response:
        try:
            with self.conn.transaction():
                with self.conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        "SELECT 1 FROM threads WHERE thread_id = %s",
                        (thread_id,),
                    )
                    if not cur.fetchone():
                        raise ThreadNotFound(thread_id)

                    number = self._next_response_number(thread_id, cur)
                    response = self._insert_response(cur, thread_id, number, post)

                    # sage replies leave the thread where it is
                    if not is_sage(post.mail):
                        cur.execute(
                            "UPDATE threads SET bumped_at = %s WHERE thread_id = %s",
                            (post.posted_at, thread_id),
                        )
                    return response
        except psycopg.Error as e:
            logger.error("Posting to thread %s failed: %s", thread_id, e)
            raise StorageUnavailable() from e
