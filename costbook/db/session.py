"""
Database engine and session management.
"""
from threading import Lock
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from costbook.core.config import get_settings
from costbook.db.base import Base

IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the configured backend.

    An in-memory SQLite URL gets a single shared connection so every session
    sees the same database for the lifetime of the process.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    if database_url in IN_MEMORY_URLS:
        kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **kwargs)
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class SerializedSession(Session):
    """
    Session that holds its engine's connection lock from creation until close.

    On a StaticPool engine every session runs on the same DBAPI connection,
    and any rollback (including the one issued when a session closes) would
    discard another session's flushed, uncommitted writes. Only one such
    session may be open at a time.

    The lock is a plain Lock: FastAPI may open and close a request's session
    on different worker threads.
    """

    def __init__(self, *args, connection_lock: Lock, **kwargs):
        connection_lock.acquire()
        self._connection_lock = connection_lock
        try:
            super().__init__(*args, **kwargs)
        except Exception:
            self._release_connection_lock()
            raise

    def _release_connection_lock(self) -> None:
        lock, self._connection_lock = self._connection_lock, None
        if lock is not None:
            lock.release()

    def close(self) -> None:
        try:
            super().close()
        finally:
            self._release_connection_lock()


def create_session_factory(bind: Engine) -> sessionmaker:
    """Session factory for `bind`; serialized when all sessions share one connection."""
    if isinstance(bind.pool, StaticPool):
        return sessionmaker(
            class_=SerializedSession,
            connection_lock=Lock(),
            autoflush=False,
            bind=bind,
        )
    return sessionmaker(autoflush=False, bind=bind)


settings = get_settings()

engine = create_db_engine(settings.DATABASE_URL)
SessionLocal = create_session_factory(engine)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables that do not exist yet."""
    import costbook.models  # noqa: F401  register models on Base.metadata

    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
