from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from losers.config import Settings
from losers.db.session import Base, build_engine
# Import all models so their tables are registered on Base.metadata
from losers.models import comment, post, user, vote  # noqa: F401


@dataclass
class AppContext:
    """Process-wide state built once at startup and attached to the app.

    Request handlers reach it through ``request.app.state.context``.
    """

    settings: Settings
    engine: Engine
    session_factory: sessionmaker

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        engine = build_engine(settings.DATABASE_URL)
        session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        return cls(settings=settings, engine=engine, session_factory=session_factory)

    def create_all(self):
        Base.metadata.create_all(bind=self.engine)

    def dispose(self):
        self.engine.dispose()
