import uuid
from datetime import datetime, timezone
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def generate_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_engine(database_url: str) -> Engine:
    """Create the engine for ``database_url``.

    SQLite gets ``check_same_thread`` disabled since FastAPI runs sync routes
    in a threadpool; in-memory SQLite is pinned to a single connection so
    every session sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(database_url, pool_pre_ping=True)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()
