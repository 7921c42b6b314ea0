# ============================================================================
# FILE: app/db/session.py
# Process-wide connection pool with an explicit lifecycle
# ============================================================================
from typing import Generator, Optional
from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from app.config import settings
from app.db.base import Base
import logging

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    """Driver specific connect/query timeouts"""
    if url.startswith("sqlite"):
        return {"check_same_thread": False, "timeout": settings.DB_CONNECT_TIMEOUT}
    if url.startswith("postgresql"):
        return {
            "connect_timeout": settings.DB_CONNECT_TIMEOUT,
            "options": f"-c statement_timeout={settings.DB_QUERY_TIMEOUT_MS}",
        }
    return {}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the engine and session factory.
    Created once at startup, disposed at shutdown.
    """

    def __init__(self, url: str = None):
        self.url = url or settings.DATABASE_URL
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None

    def connect(self) -> None:
        if self.engine is not None:
            return

        engine_kwargs = {"connect_args": _connect_args(self.url), "pool_pre_ping": True}
        if not self.url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=settings.DB_POOL_SIZE,
                max_overflow=settings.DB_MAX_OVERFLOW,
                pool_timeout=settings.DB_POOL_TIMEOUT,
            )

        self.engine = create_engine(self.url, **engine_kwargs)
        if self.url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        logger.info(f"Database engine created ({self.engine.url.get_backend_name()})")

    def create_tables(self) -> None:
        import app.db.models  # noqa: F401  registers every table on Base.metadata
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self.session_factory is None:
            raise RuntimeError("Database is not connected")
        return self.session_factory()

    def health_check(self) -> bool:
        if self.engine is None:
            return False
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database engine disposed")
        self.engine = None
        self.session_factory = None


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Generator[Session, None, None]:
    """Request scoped session from the application's pool"""
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
