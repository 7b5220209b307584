from __future__ import annotations

import base64
import hashlib
import logging
from datetime import datetime, timezone
from typing import Optional

from threadboard.config.settings import MAX_CONTENT_LENGTH, MAX_TITLE_LENGTH
from threadboard.core.errors import BoardError, InvalidPost
from threadboard.core.identifiers import parse_thread_id
from threadboard.core.models import NewPost, Response, ThreadMeta
from threadboard.core.response_store import ResponseStore
from threadboard.core.result import Err, Ok, Result
from threadboard.core.windowing import JST

MAX_NAME_LENGTH = 64
MAX_MAIL_LENGTH = 64

TRIP_MARK = "◆"
TRIP_KEY_SEPARATOR = "#"


def make_tripcode(key: str) -> str:
    digest = hashlib.sha1(key.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")[:12].replace("+", ".")


def resolve_author_name(raw: Optional[str]) -> str:
    """``name#key`` becomes ``name ◆tripcode``; a typed ◆ is replaced with ◇."""
    if not raw:
        return ""

    name, separator, key = raw.partition(TRIP_KEY_SEPARATOR)
    name = name.strip().replace(TRIP_MARK, "◇")
    if not separator or not key:
        return name
    return f"{name} {TRIP_MARK}{make_tripcode(key)}"


def compute_hash_id(
    client_address: str, thread_id: int, posted_at: datetime, salt: str
) -> str:
    # Stable for one poster within one thread for the whole JST day
    day = posted_at.astimezone(JST).strftime("%Y-%m-%d")
    digest = hashlib.sha256(f"{client_address}:{thread_id}:{day}:{salt}".encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")[:8]


def _validate(name: str, mail: str, content: str) -> Optional[InvalidPost]:
    if not content.strip():
        return InvalidPost("Message cannot be empty")
    if len(content) > MAX_CONTENT_LENGTH:
        return InvalidPost(f"Message is longer than {MAX_CONTENT_LENGTH} characters")
    if len(name) > MAX_NAME_LENGTH:
        return InvalidPost(f"Name is longer than {MAX_NAME_LENGTH} characters")
    if len(mail) > MAX_MAIL_LENGTH:
        return InvalidPost(f"Mail is longer than {MAX_MAIL_LENGTH} characters")
    return None


def _build_post(
    *,
    name: str,
    mail: str,
    content: str,
    client_address: str,
    thread_id: int,
    salt: str,
    now: Optional[datetime],
) -> NewPost:
    posted_at = now or datetime.now(timezone.utc)
    return NewPost(
        author_name=resolve_author_name(name),
        mail=mail.strip(),
        content=content,
        hash_id=compute_hash_id(client_address, thread_id, posted_at, salt),
        posted_at=posted_at,
    )


def create_thread(
    store: ResponseStore,
    logger: logging.Logger,
    *,
    title: str,
    name: str,
    mail: str,
    content: str,
    client_address: str,
    salt: str,
    now: Optional[datetime] = None,
) -> Result[ThreadMeta, BoardError]:
    title = title.strip()
    if not title:
        return Err(InvalidPost("Title cannot be empty"))
    if len(title) > MAX_TITLE_LENGTH:
        return Err(InvalidPost(f"Title is longer than {MAX_TITLE_LENGTH} characters"))

    invalid = _validate(name, mail, content)
    if invalid:
        return Err(invalid)

    try:
        thread_id = store.reserve_thread_id()
        post = _build_post(
            name=name, mail=mail, content=content,
            client_address=client_address, thread_id=thread_id, salt=salt, now=now,
        )
        meta = store.create_thread(title, post, thread_id=thread_id)
    except BoardError as e:
        logger.error("Failed to create thread: %s", e.message, extra={"operation": "threads/create"})
        return Err(e)

    logger.info("Created thread %s", meta.thread_id, extra={"operation": "threads/create"})
    return Ok(meta)


def post_response(
    store: ResponseStore,
    logger: logging.Logger,
    *,
    thread_id_raw: str,
    name: str,
    mail: str,
    content: str,
    client_address: str,
    salt: str,
    now: Optional[datetime] = None,
) -> Result[Response, BoardError]:
    log_extra = {"operation": "threads/respond", "thread_id": thread_id_raw}

    thread_id = parse_thread_id(thread_id_raw)
    if thread_id.is_err():
        return thread_id

    invalid = _validate(name, mail, content)
    if invalid:
        return Err(invalid)

    post = _build_post(
        name=name, mail=mail, content=content,
        client_address=client_address, thread_id=thread_id.value, salt=salt, now=now,
    )
    try:
        response = store.append_response(thread_id.value, post)
    except BoardError as e:
        logger.error("Failed to post response: %s", e.message, extra=log_extra)
        return Err(e)

    logger.info("Posted response %s", response.response_number, extra=log_extra)
    return Ok(response)
