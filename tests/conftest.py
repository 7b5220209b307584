"""Shared pytest fixtures for threadboard tests."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from threadboard.core.memory_store import InMemoryResponseStore
from threadboard.core.models import NewPost

# 2025-02-23 08:41:28.905 JST, a Sunday
BASE_TIME = datetime(2025, 2, 22, 23, 41, 28, 905000, tzinfo=timezone.utc)


def make_post(
    content: str = "hello",
    *,
    author_name: str = "",
    mail: str = "",
    hash_id: str = "abcd1234",
    posted_at: datetime = BASE_TIME,
) -> NewPost:
    return NewPost(
        author_name=author_name,
        mail=mail,
        content=content,
        hash_id=hash_id,
        posted_at=posted_at,
    )


@pytest.fixture
def logger() -> logging.Logger:
    return logging.getLogger("threadboard.tests")


@pytest.fixture
def store() -> InMemoryResponseStore:
    return InMemoryResponseStore()


@pytest.fixture
def thread_of_30(store: InMemoryResponseStore) -> int:
    """A thread holding responses 1..30, one minute apart.

    Every third response is sage and every even one is anonymous.
    """
    meta = store.create_thread("Test thread", make_post("first", author_name="OP"))
    for number in range(2, 31):
        store.append_response(
            meta.thread_id,
            make_post(
                f"response {number}",
                author_name="" if number % 2 == 0 else f"poster{number}",
                mail="sage" if number % 3 == 0 else "",
                posted_at=BASE_TIME + timedelta(minutes=number - 1),
            ),
        )
    return meta.thread_id
