from __future__ import annotations

import logging
from typing import Optional

from threadboard.core.errors import BoardError, ResponseNotFound
from threadboard.core.identifiers import parse_thread_id
from threadboard.core.models import ThreadWithResponses
from threadboard.core.query import Single, classify, is_recognised
from threadboard.core.response_store import ResponseStore
from threadboard.core.result import Err, Ok, Result
from threadboard.core.windowing import derive_display_responses

OPERATION = "threads/read"


def read_thread(
    store: ResponseStore,
    logger: logging.Logger,
    *,
    thread_id_raw: str,
    query_raw: Optional[str],
    default_author_name: str,
    accept_language: Optional[str] = None,
) -> Result[ThreadWithResponses, BoardError]:
    """
    Resolve ``query_raw`` against thread ``thread_id_raw`` and build the
    display-ready window. Every failure comes back as an ``Err``.
    """
    log_extra = {"operation": OPERATION, "thread_id": thread_id_raw, "query": query_raw}
    logger.info("Thread read requested", extra=log_extra)

    thread_id = parse_thread_id(thread_id_raw)
    if thread_id.is_err():
        logger.info("Rejected thread id", extra=log_extra)
        return thread_id

    spec = classify(query_raw)
    if spec.is_err():
        logger.info("Rejected query segment", extra=log_extra)
        return spec
    spec = spec.value

    if not is_recognised(query_raw):
        logger.debug("Query format not recognised, fetching all responses", extra=log_extra)
    else:
        logger.debug("Fetching %s", spec.describe(), extra=log_extra)

    try:
        meta, responses = store.fetch_responses(thread_id.value, spec)
    except BoardError as e:
        logger.error("Failed to fetch thread responses: %s", e.message, extra=log_extra)
        return Err(e)

    if isinstance(spec, Single) and not responses:
        return Err(ResponseNotFound(thread_id.value, spec.number))

    display = derive_display_responses(responses, default_author_name, accept_language)

    logger.debug(
        "Fetched %d of %d responses for %r",
        len(display),
        meta.response_count,
        meta.title,
        extra=log_extra,
    )
    return Ok(ThreadWithResponses(thread=meta, responses=display))
