"""Database handle: one engine and session factory with explicit init/teardown."""

import logging
from collections.abc import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the connection pool to the relational store.

    Constructed once per application (or per test) and passed around explicitly;
    call init() before use and dispose() on shutdown.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = self._create_engine(url, echo)
        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=self.engine,
        )

    @staticmethod
    def _create_engine(url: str, echo: bool) -> Engine:
        if not url.startswith("sqlite"):
            return create_engine(url, pool_pre_ping=True, echo=echo)
        kwargs: dict = {"connect_args": {"check_same_thread": False}, "echo": echo}
        if url in ("sqlite://", "sqlite:///:memory:", "sqlite+pysqlite://"):
            # In-memory databases live on a single connection.
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    def init(self, create_tables: bool = False) -> None:
        """Verify connectivity and optionally create missing tables."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        if create_tables:
            Base.metadata.create_all(self.engine)
        logger.info("Database initialised (create_tables=%s)", create_tables)

    def session(self) -> Session:
        return self.session_factory()

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections disposed")


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = request.app.state.db.session()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False
