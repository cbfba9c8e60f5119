from pydantic import BaseModel, ConfigDict, Field
from losers.schemas.base import AuthorResponse


class RegisterRequest(BaseModel):
    username: str = Field(
        min_length=3,
        max_length=20,
        pattern=r"^[a-zA-Z0-9_]+$",
        description="Letters, numbers and underscores only",
    )
    nickname: str = Field(min_length=2, max_length=50)
    password: str = Field(min_length=6, max_length=100)

    model_config = ConfigDict(extra="forbid")


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)

    model_config = ConfigDict(extra="forbid")


class AuthResponse(BaseModel):
    access_token: str
    user: AuthorResponse


class UserCountResponse(BaseModel):
    count: int
