from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, RootModel, model_validator

from losers.schemas.base import AuthorResponse, CamelModel
from losers.schemas.comment_schema import CommentResponse

# Posts are a tagged union keyed by category: GENERAL posts carry free-form
# `contents`, the other categories carry a what-failed / lesson-learned pair.
GeneralCategory = Literal["GENERAL"]
FailureCategory = Literal["COLLEGE", "ENTREPRENEURS", "PROFESSIONALS", "LIFE"]


# Requests

def _drop_blank(data, keys):
    """Remove the other variant's fields when the client sent them empty.

    The web form always submits all three text fields; only the ones that
    belong to the chosen category carry content.
    """
    if isinstance(data, dict):
        return {
            key: value for key, value in data.items()
            if key not in keys or (value is not None and value != "")
        }
    return data


class GeneralPostCreate(CamelModel):
    title: str = Field(min_length=1, max_length=150)
    category: GeneralCategory
    contents: str = Field(min_length=1, max_length=5000)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def drop_blank_failure_fields(cls, data: Any) -> Any:
        return _drop_blank(data, ("whatFailed", "lessonLearned", "what_failed", "lesson_learned"))


class FailurePostCreate(CamelModel):
    title: str = Field(min_length=1, max_length=150)
    category: FailureCategory
    what_failed: str = Field(min_length=1, max_length=500)
    lesson_learned: str = Field(min_length=1, max_length=500)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def drop_blank_contents(cls, data: Any) -> Any:
        return _drop_blank(data, ("contents",))


class PostCreate(RootModel):
    root: Annotated[
        Union[GeneralPostCreate, FailurePostCreate],
        Field(discriminator="category"),
    ]


# Responses

class PostCounts(CamelModel):
    comments: int
    votes: int  # net votes


class PostBase(CamelModel):
    id: str
    title: str
    author_id: str
    author: AuthorResponse
    created_at: datetime
    counts: PostCounts = Field(alias="_count")
    user_vote: Optional[bool] = None


class GeneralPost(PostBase):
    category: GeneralCategory
    contents: str


class FailurePost(PostBase):
    category: FailureCategory
    what_failed: str
    lesson_learned: str


class PostResponse(RootModel):
    root: Annotated[Union[GeneralPost, FailurePost], Field(discriminator="category")]


class GeneralPostDetail(GeneralPost):
    net_votes: int
    comments: List[CommentResponse] = []


class FailurePostDetail(FailurePost):
    net_votes: int
    comments: List[CommentResponse] = []


class PostDetailResponse(RootModel):
    root: Annotated[
        Union[GeneralPostDetail, FailurePostDetail],
        Field(discriminator="category"),
    ]
