"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.v1 import router as v1_router
from app.core.config import Settings, get_settings
from app.core.database import Database

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the application around an explicitly constructed Database handle.

    The handle lives on app.state.db; it is initialised on startup and disposed on shutdown.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)
    db = Database(settings.DATABASE_URL, echo=settings.DEBUG)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db.init(create_tables=settings.DB_CREATE_TABLES)
        try:
            yield
        finally:
            db.dispose()

    app = FastAPI(
        title="Super Admin Console API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.db = db

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Super Admin Console API"}

    return app


app = create_app()
