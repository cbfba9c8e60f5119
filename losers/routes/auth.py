from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from losers.config import Settings
from losers.core.deps import get_settings
from losers.core.errors import unwrap
from losers.db.session import get_db
from losers.schemas.auth_schema import AuthResponse, LoginRequest, RegisterRequest, UserCountResponse
from losers.services.auth import count_users, login_user, register_user

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: RegisterRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return unwrap(register_user(user, db, settings))


@router.post("/login", response_model=AuthResponse)
def login(user: LoginRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    return unwrap(login_user(user, db, settings))


@router.get("/user-count", response_model=UserCountResponse)
def user_count(db: Session = Depends(get_db)):
    return unwrap(count_users(db))
