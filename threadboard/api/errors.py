from fastapi import HTTPException

from threadboard.core.errors import (
    BoardError,
    InvalidIdentifier,
    InvalidPost,
    InvalidQuery,
    ResponseNotFound,
    StorageUnavailable,
    ThreadNotFound,
)
from threadboard.schemas.reads import ErrorOut

STATUS_BY_ERROR = {
    InvalidIdentifier: 400,
    InvalidQuery: 400,
    InvalidPost: 400,
    ThreadNotFound: 404,
    ResponseNotFound: 404,
    StorageUnavailable: 503,
}


def to_http_exception(error: BoardError) -> HTTPException:
    status_code = STATUS_BY_ERROR.get(type(error), 500)
    return HTTPException(
        status_code=status_code,
        detail=ErrorOut(kind=error.kind, message=error.message).model_dump(),
    )
