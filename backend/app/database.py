"""
Database connection and session management module.

Uses SQLAlchemy for ORM operations. Supports SQLite (default) and
PostgreSQL. A `Database` is built explicitly from a URL and handed to the
FastAPI app, which opens one session per request through `get_db` /
`get_write_db`.

SQLite write sessions start their transaction with BEGIN IMMEDIATE, which
takes the database write lock up front. Every check-then-insert performed
by the core therefore runs serialized against other writers. Read sessions
use a plain deferred BEGIN and read a WAL snapshot.
"""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase

from app.errors import InternalError
from app.logging_config import get_logger, log_with_context

logger = get_logger("db")

# Read database URL from environment
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./campus_events.db"
)

# Seconds a SQLite writer waits for the write lock before giving up
SQLITE_BUSY_TIMEOUT = float(os.getenv("SQLITE_BUSY_TIMEOUT", "30"))

# Execution option naming the statement that opens a SQLite transaction
BEGIN_OPTION = "sqlite_begin"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def _engine_kwargs(url: str) -> dict:
    # SQLite does not support pool_size, max_overflow, or pool_pre_ping
    kwargs = {"echo": False}
    if url.startswith("postgresql"):
        kwargs.update({
            "pool_size": 10,
            "max_overflow": 20,
            "pool_pre_ping": True,
        })
    elif url.startswith("sqlite"):
        # check_same_thread=False: FastAPI serves sync routes from a threadpool
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": SQLITE_BUSY_TIMEOUT,
        }
    return kwargs


def _install_sqlite_hooks(engine):
    """Take over transaction control from pysqlite and enable FK checks."""

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        # Stop pysqlite from emitting its own BEGIN; see do_begin below
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql(conn.get_execution_options().get(BEGIN_OPTION, "BEGIN"))


class Database:
    """
    Explicitly constructed storage handle.

    Owns the engine and two session factories: one for read-only work and
    one for writes. Nothing here is module-global, so tests and the app can
    each build their own instance.
    """

    def __init__(self, url: Optional[str] = None):
        self.url = url or DATABASE_URL
        self.is_sqlite = self.url.startswith("sqlite")
        self.engine = create_engine(self.url, **_engine_kwargs(self.url))

        write_bind = self.engine
        if self.is_sqlite:
            _install_sqlite_hooks(self.engine)
            write_bind = self.engine.execution_options(**{BEGIN_OPTION: "BEGIN IMMEDIATE"})

        self._read_sessions = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._write_sessions = sessionmaker(autocommit=False, autoflush=False, bind=write_bind)

        log_with_context(logger, "INFO", "Database engine created",
                         extra_data={"dialect": self.engine.dialect.name})

    def create_tables(self):
        """
        Create all tables directly from the ORM metadata.
        """
        # Register every model with Base.metadata
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        log_with_context(logger, "INFO", "Tables created",
                         extra_data={"tables": sorted(Base.metadata.tables)})

    def dispose(self):
        self.engine.dispose()

    @contextmanager
    def session(self, write: bool = False) -> Iterator[Session]:
        """
        Scoped unit of work: one session, always closed on exit.

        Uncommitted work is rolled back by close(), so a caller that fails
        mid-operation leaves no partial effect behind.
        """
        factory = self._write_sessions if write else self._read_sessions
        db = factory()
        try:
            yield db
        finally:
            db.close()


@contextmanager
def store_read(operation: str) -> Iterator[None]:
    """Map storage failures during a read to InternalError."""
    try:
        yield
    except SQLAlchemyError as exc:
        log_with_context(logger, "ERROR", "Read failed: {}".format(operation),
                         extra_data={"error": type(exc).__name__})
        raise InternalError(operation, exc) from exc


def get_db(request: Request):
    """
    FastAPI dependency that provides a read session.

    Yields a session and ensures proper cleanup after request completion.
    """
    with request.app.state.database.session() as db:
        yield db


def get_write_db(request: Request):
    """FastAPI dependency that provides a write session."""
    with request.app.state.database.session(write=True) as db:
        yield db
