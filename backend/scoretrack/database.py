"""
Database connection and unit-of-work management module.

Uses SQLAlchemy for ORM operations. SQLite is the default backing file;
any SQLAlchemy URL is accepted through DATABASE_URL.

The store is a single exclusively-owned resource: every operation runs
inside ``Database.unit_of_work()``, which holds the process-wide lock
for its whole duration and wraps the work in one transaction.
"""

import os
import threading
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.pool import StaticPool

from scoretrack.errors import ScoreTrackError, StorageError, LockContention
from scoretrack.logging_config import get_logger, log_with_context

logger = get_logger("db")

# Read configuration from environment
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./scoretrack.db")
LOCK_TIMEOUT_SECONDS = float(os.getenv("SCORETRACK_LOCK_TIMEOUT", "30"))

# One lock for the whole process: at most one store operation in flight
STORE_LOCK = threading.Lock()


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def build_engine(url: str = DATABASE_URL):
    """
    Create an engine configured for the given URL.

    SQLite gets check_same_thread=False (FastAPI runs sync routes in a
    thread pool) and foreign keys switched on so cascade deletes are
    enforced by the database. In-memory SQLite uses a StaticPool so every
    session shares the single connection that holds the data.
    """
    engine_kwargs = {"echo": False}

    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(url, **engine_kwargs)

    if url.startswith("sqlite"):
        in_memory = "poolclass" in engine_kwargs

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            if not in_memory:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


class Database:
    """
    Owns the engine, the session factory and the store lock.

    Both RecordStore and TemplateStore are built on one Database so that
    they share the same connection and the same mutual exclusion.
    """

    def __init__(self, engine, lock: threading.Lock = STORE_LOCK,
                 lock_timeout: float = LOCK_TIMEOUT_SECONDS):
        self.engine = engine
        self.lock = lock
        self.lock_timeout = lock_timeout
        self.session_factory = sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )

    def create_tables(self):
        """Create all tables directly. Other databases use the Alembic revision."""
        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def unit_of_work(self) -> Session:
        """
        Run a block under the store lock inside a single transaction.

        Commits when the block exits normally. Any exception rolls back
        every write made in the block. SQLAlchemy errors and driver
        overflows are surfaced as StorageError; store errors raised by the
        block pass through as-is.
        """
        if not self.lock.acquire(timeout=self.lock_timeout):
            log_with_context(logger, "ERROR", "Store lock not acquired",
                             extra_data={"timeout_s": self.lock_timeout})
            raise LockContention(self.lock_timeout)
        try:
            session = self.session_factory()
            try:
                with session.begin():
                    yield session
            except ScoreTrackError:
                raise
            except (SQLAlchemyError, OverflowError) as e:
                log_with_context(logger, "ERROR", "Transaction rolled back: {}".format(e))
                raise StorageError("Database operation failed: {}".format(e)) from e
            finally:
                session.close()
        finally:
            self.lock.release()


_default_database = None


def get_database() -> Database:
    """
    FastAPI dependency returning the process-wide Database.

    The engine is created lazily on first use so importing the package
    never touches the filesystem.
    """
    global _default_database
    if _default_database is None:
        _default_database = Database(build_engine(DATABASE_URL))
    return _default_database
