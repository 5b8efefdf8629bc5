"""Database engine and session management."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from nutriplan.config import get_settings
from nutriplan.db.models import Base

IN_MEMORY_PATH = ":memory:"

_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None
logger = logging.getLogger(__name__)


def _create_sqlite_engine(db_path: Path) -> Engine:
    # The API serves requests from a worker thread pool, so connections are shared.
    connect_args = {"check_same_thread": False}
    if str(db_path) == IN_MEMORY_PATH:
        return create_engine("sqlite://", connect_args=connect_args, poolclass=StaticPool)

    if not db_path.parent.exists():
        logger.info("Creating database directory %s", db_path.parent)
        db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}", connect_args=connect_args)


def get_engine(database_path: Path | None = None) -> Engine:
    """Return the shared SQLite engine, creating the schema on first use.

    ``:memory:`` keeps everything in a single in-process connection, which is
    handy for throwaway CLI runs.
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    db_path = database_path or get_settings().database_path
    engine = _create_sqlite_engine(db_path)
    try:
        Base.metadata.create_all(engine)
    except OperationalError as exc:
        if "already exists" not in str(exc).lower():
            engine.dispose()
            raise
        logger.debug("Database schema already initialized: %s", exc)

    _engine = engine
    _session_factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    logger.info(
        "Opened SQLite database at %s with tables %s",
        db_path,
        ", ".join(sorted(Base.metadata.tables)),
    )
    return _engine


def get_session() -> Session:
    if _session_factory is None:
        get_engine()
    if _session_factory is None:
        raise RuntimeError("Session factory was not initialized")
    return _session_factory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Context manager yielding a session with automatic commit/rollback."""
    session = get_session()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_repository_state() -> None:
    """Drop the cached engine and session factory (used by tests)."""

    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None


__all__ = ["IN_MEMORY_PATH", "get_engine", "get_session", "reset_repository_state", "session_scope"]
