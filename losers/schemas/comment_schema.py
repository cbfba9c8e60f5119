from datetime import datetime
from pydantic import ConfigDict, Field
from losers.schemas.base import AuthorResponse, CamelModel


class CommentCreate(CamelModel):
    content: str = Field(min_length=1, max_length=1000)

    model_config = ConfigDict(extra="forbid")


class CommentResponse(CamelModel):
    id: str
    content: str
    post_id: str
    author_id: str
    created_at: datetime
    author: AuthorResponse
