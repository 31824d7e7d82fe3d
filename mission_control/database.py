"""Database setup — engine, session factory, and transaction helpers.

Every mutating service call runs inside ``transaction(db)``: the task row,
its activity and its notifications are committed together or not at all.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DisconnectionError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from .config import settings
from .exceptions import ConcurrentModification, StorageUnavailable

logger = logging.getLogger("mission_control.database")

Base = declarative_base()

_STORAGE_ERRORS = (OperationalError, InterfaceError, DisconnectionError)


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def make_engine(url: str, **kwargs):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    engine = create_engine(url, echo=settings.SQL_ECHO, connect_args=connect_args, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    return engine


engine = make_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_tables(bind=None) -> None:
    """Create all tables known to ``Base.metadata`` (dev / tests; prod uses Alembic)."""
    from . import models  # noqa: F401  (registers the mappers)

    Base.metadata.create_all(bind or engine)


def get_db() -> Iterator[Session]:
    """Dependency for FastAPI endpoints."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything added inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        logger.warning("Concurrent modification detected: %s", exc)
        raise ConcurrentModification("The task was modified concurrently; try again.") from exc
    except _STORAGE_ERRORS as exc:
        db.rollback()
        logger.error("Storage unavailable during write: %s", exc)
        raise StorageUnavailable(str(exc)) from exc
    except Exception:
        db.rollback()
        raise


@contextmanager
def storage_errors() -> Iterator[None]:
    """Translate driver-level failures on read paths into ``StorageUnavailable``."""
    try:
        yield
    except _STORAGE_ERRORS as exc:
        logger.error("Storage unavailable during read: %s", exc)
        raise StorageUnavailable(str(exc)) from exc
