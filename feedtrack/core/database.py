"""
Durable store connection
========================

One process-wide SQLAlchemy engine for the feedback_records table,
built on first use from ``settings.get_database_url()``:

- ``sqlite:///./data/feedtrack.db`` (default): WAL journal, 5 s busy
  timeout, usable from worker threads.
- any other SQLAlchemy URL: pooled, with pre-ping.
- empty FEEDTRACK_DATABASE_URL: no engine; the service stays on memory.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from feedtrack.config import settings

logger = logging.getLogger(__name__)

SQLITE_PRAGMAS = ("PRAGMA journal_mode=WAL", "PRAGMA busy_timeout=5000")

_engine: Optional[Engine] = None


def _apply_sqlite_pragmas(dbapi_conn, _record) -> None:
    cursor = dbapi_conn.cursor()
    try:
        for pragma in SQLITE_PRAGMAS:
            cursor.execute(pragma)
    finally:
        cursor.close()


def _build_engine(url: str) -> Engine:
    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, echo=settings.debug, pool_pre_ping=True, pool_size=5, max_overflow=10)

    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(url, echo=settings.debug, connect_args={"check_same_thread": False})
    event.listen(engine, "connect", _apply_sqlite_pragmas)
    return engine


def get_engine() -> Engine:
    """Shared engine; RuntimeError when the durable store is disabled."""
    global _engine
    if _engine is None:
        url = settings.get_database_url()
        if not url:
            raise RuntimeError("Durable store is disabled (empty FEEDTRACK_DATABASE_URL)")
        _engine = _build_engine(url)
        logger.info("Durable store engine created for %s", make_url(url).render_as_string(hide_password=True))
    return _engine


@contextmanager
def get_session_context() -> Iterator[Session]:
    with Session(get_engine()) as session:
        yield session


def ping() -> bool:
    """True when ``SELECT 1`` round-trips."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError, RuntimeError) as exc:
        logger.warning("Database ping failed: %s", exc)
        return False
    return True


def create_tables() -> None:
    """Create missing tables. Raises if the database cannot be reached."""
    from feedtrack.models.feedback import FeedbackRow  # noqa: F401
    SQLModel.metadata.create_all(get_engine())


def init_db() -> bool:
    """Create tables at startup.

    Non-fatal: returns False when the durable store is disabled or
    unreachable. An unreachable store is retried by SQLFeedbackStore on
    every call until the tables exist.
    """
    if not settings.get_database_url():
        logger.warning("Durable store disabled - feedback will be held in memory only")
        return False
    try:
        create_tables()
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Database init failed (serving from memory until it is reachable): %s", exc)
        return False
    logger.info("Database tables initialized")
    return True


def close_db() -> None:
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database connections closed")
