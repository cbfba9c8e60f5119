import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from losers.config import Settings
from losers.core.errors import ServiceError
from losers.core.security import create_access_token, hash_password, verify_password
from losers.models.user import User
from losers.schemas.auth_schema import AuthResponse, LoginRequest, RegisterRequest, UserCountResponse
from losers.schemas.base import AuthorResponse

logger = logging.getLogger(__name__)


def _issue_token(user: User, settings: Settings) -> AuthResponse:
    token = create_access_token(
        {"username": user.username, "sub": user.id}, settings)
    return AuthResponse(access_token=token, user=AuthorResponse.model_validate(user))


def register_user(user: RegisterRequest, db: Session, settings: Settings) -> AuthResponse | ServiceError:
    logger.debug(f"Registering user: {user.username}")
    try:
        # Check if the username is already taken
        existing_user = db.query(User).filter(User.username == user.username).first()
        if existing_user:
            return ServiceError.conflict("Username already exists")

        # Hash the password and create a new user
        new_user = User(username=user.username, nickname=user.nickname,
                        password=hash_password(user.password))
        db.add(new_user)
        db.commit()
        db.refresh(new_user)
    except IntegrityError:
        # Lost a race against a concurrent registration of the same name
        db.rollback()
        return ServiceError.conflict("Username already exists")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration error")
        return ServiceError.internal("Failed to create user")

    logger.info(f"Registered user {new_user.id} ({new_user.username})")
    return _issue_token(new_user, settings)


def login_user(user: LoginRequest, db: Session, settings: Settings) -> AuthResponse | ServiceError:
    logger.debug(f"Logging in user: {user.username}")
    try:
        db_user = db.query(User).filter(User.username == user.username).first()
    except SQLAlchemyError:
        logger.exception("Login error")
        return ServiceError.internal("Failed to authenticate user")

    if not db_user or not verify_password(user.password, db_user.password):
        return ServiceError.unauthorized("Invalid credentials")

    return _issue_token(db_user, settings)


def count_users(db: Session) -> UserCountResponse | ServiceError:
    try:
        return UserCountResponse(count=db.query(func.count(User.id)).scalar() or 0)
    except SQLAlchemyError:
        logger.exception("User count error")
        return ServiceError.internal("Failed to get user count")
