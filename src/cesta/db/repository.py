"""SQLite engine for the shopping database and the unit-of-work helper."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from cesta.config import get_settings
from cesta.db.models import Base

_engine: Engine | None = None
_engine_path: Path | None = None
_session_factory: sessionmaker[Session] | None = None
logger = logging.getLogger(__name__)


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite leaves foreign keys off per connection; recipe ingredients rely on the cascade.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _open(db_path: Path) -> Engine:
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        f"sqlite:///{db_path}",
        # FastAPI runs sync endpoints on a thread pool.
        connect_args={"check_same_thread": False},
        future=True,
        echo=False,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    Base.metadata.create_all(engine)
    return engine


def get_engine(database_path: Path | None = None) -> Engine:
    """Return the engine for the configured shopping database.

    The schema (planned meals, shopping items, recipes) is created on first use. The
    cached engine is replaced when ``CESTA_DATABASE_PATH`` points somewhere else.
    """
    global _engine, _engine_path, _session_factory

    db_path = Path(database_path or get_settings().database_path)
    if _engine is not None and _engine_path == db_path:
        return _engine

    if _engine is not None:
        logger.info("Shopping database moved from %s to %s", _engine_path, db_path)
        _engine.dispose()

    _engine = _open(db_path)
    _engine_path = db_path
    _session_factory = sessionmaker(bind=_engine, autoflush=False, autocommit=False, future=True)
    logger.debug("Opened shopping database at %s", db_path)
    return _engine


def get_session() -> Session:
    """Return a new session bound to the current shopping database."""

    get_engine()
    assert _session_factory is not None  # for mypy
    return _session_factory()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Run the block as one unit of work: commit on success, roll back on any error."""
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
    """Dispose of the cached engine so the next call reads settings again (tests)."""

    global _engine, _engine_path, _session_factory
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _engine_path = None
    _session_factory = None


__all__ = ["get_engine", "get_session", "session_scope", "reset_repository_state"]
