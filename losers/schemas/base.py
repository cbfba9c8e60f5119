from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake-case fields in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AuthorResponse(BaseModel):
    """Author projection embedded in posts and comments."""

    id: str
    username: str
    nickname: str

    model_config = ConfigDict(from_attributes=True)
