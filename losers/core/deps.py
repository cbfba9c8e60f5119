from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from losers.config import Settings
from losers.context import AppContext
from losers.core.security import decode_access_token
from losers.db.session import get_db
from losers.models.user import User

# auto_error=False so read paths can serve anonymous callers
bearer_scheme = HTTPBearer(auto_error=False)


def get_context(request: Request) -> AppContext:
    return request.app.state.context


def get_settings(context: AppContext = Depends(get_context)) -> Settings:
    return context.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> str:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = decode_access_token(credentials.credentials, settings)
    user_id = payload.get("sub") if payload else None
    if not user_id:
        raise _unauthorized("Invalid or expired token")

    if db.get(User, user_id) is None:
        raise _unauthorized("User no longer exists")
    return user_id


def get_optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> str | None:
    """Identify the caller when a valid token is present; anonymous otherwise."""
    if credentials is None:
        return None
    payload = decode_access_token(credentials.credentials, settings)
    return payload.get("sub") if payload else None
