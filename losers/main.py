import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from losers.config import Settings
from losers.context import AppContext
from losers.core.errors import register_exception_handlers
from losers.routes import auth, posts, root


def configure_logging(settings: Settings):
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and its context.

    Run with ``uvicorn losers.main:create_app --factory``.
    """
    settings = settings or Settings()
    configure_logging(settings)
    context = AppContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        context.dispose()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_origin_regex=settings.ALLOWED_ORIGIN_REGEX,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)

    app.include_router(root.router)
    app.include_router(auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
    app.include_router(posts.router, prefix=settings.API_PREFIX)
    return app
