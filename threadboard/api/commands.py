import logging

from fastapi import APIRouter, Depends, Request

from threadboard.api.dependencies import get_response_store
from threadboard.api.errors import to_http_exception
from threadboard.config.settings import HASH_ID_SALT
from threadboard.core.response_store import ResponseStore
from threadboard.schemas.commands import (
    CreateThreadRequest,
    CreateThreadResponse,
    PostResponseRequest,
    PostResponseResponse,
)
from threadboard.services import posting

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/threads", tags=["commands"])


def _client_address(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("", response_model=CreateThreadResponse, status_code=201)
def create_thread(
    req: CreateThreadRequest,
    request: Request,
    store: ResponseStore = Depends(get_response_store),
):
    result = posting.create_thread(
        store,
        logger,
        title=req.title,
        name=req.name,
        mail=req.mail,
        content=req.content,
        client_address=_client_address(request),
        salt=HASH_ID_SALT,
    )
    if result.is_err():
        raise to_http_exception(result.error)

    return CreateThreadResponse(
        thread_id=result.value.thread_id,
        title=result.value.title,
    )


@router.post("/{thread_id}/responses", response_model=PostResponseResponse, status_code=201)
def post_response(
    thread_id: str,
    req: PostResponseRequest,
    request: Request,
    store: ResponseStore = Depends(get_response_store),
):
    result = posting.post_response(
        store,
        logger,
        thread_id_raw=thread_id,
        name=req.name,
        mail=req.mail,
        content=req.content,
        client_address=_client_address(request),
        salt=HASH_ID_SALT,
    )
    if result.is_err():
        raise to_http_exception(result.error)

    return PostResponseResponse(
        thread_id=result.value.thread_id,
        response_number=result.value.response_number,
        hash_id=result.value.hash_id,
    )
