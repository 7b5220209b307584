import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header

from threadboard.api.dependencies import get_response_store
from threadboard.api.errors import to_http_exception
from threadboard.config.settings import DEFAULT_AUTHOR_NAME
from threadboard.core.response_store import ResponseStore
from threadboard.schemas.reads import ThreadOut
from threadboard.services.thread_reads import read_thread

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/threads", tags=["reads"])


def _render(
    store: ResponseStore,
    thread_id: str,
    query: str,
    accept_language: Optional[str],
) -> ThreadOut:
    result = read_thread(
        store,
        logger,
        thread_id_raw=thread_id,
        query_raw=query,
        default_author_name=DEFAULT_AUTHOR_NAME,
        accept_language=accept_language,
    )
    if result.is_err():
        raise to_http_exception(result.error)
    return ThreadOut.from_aggregate(result.value)


@router.get("/{thread_id}", response_model=ThreadOut)
def get_thread(
    thread_id: str,
    accept_language: Optional[str] = Header(None),
    store: ResponseStore = Depends(get_response_store),
):
    return _render(store, thread_id, "", accept_language)


@router.get("/{thread_id}/{query}", response_model=ThreadOut)
def get_thread_window(
    thread_id: str,
    query: str,
    accept_language: Optional[str] = Header(None),
    store: ResponseStore = Depends(get_response_store),
):
    return _render(store, thread_id, query, accept_language)
