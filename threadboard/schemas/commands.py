from pydantic import BaseModel, Field

from threadboard.config.settings import MAX_CONTENT_LENGTH, MAX_TITLE_LENGTH


class CreateThreadRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    name: str = Field("", description="Author name, optionally name#tripkey")
    mail: str = Field("", description="Mail field; 'sage' keeps the thread in place")
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)


class CreateThreadResponse(BaseModel):
    thread_id: int
    title: str


class PostResponseRequest(BaseModel):
    name: str = ""
    mail: str = ""
    content: str = Field(..., min_length=1, max_length=MAX_CONTENT_LENGTH)


class PostResponseResponse(BaseModel):
    thread_id: int
    response_number: int
    hash_id: str
