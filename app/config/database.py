"""
Relational store initialization.
Single-source-of-truth SQLAlchemy engine and session factory for Madurai Clean.
"""

from typing import Generator, Optional
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.core.settings import settings

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_session_local: Optional[sessionmaker] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs) -> Engine:
    """
    Create an engine for the given URL.

    SQLite connections get foreign key enforcement switched on, since
    referential integrity (RSVP -> event, report -> ward) relies on it.
    """
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})

    engine = create_engine(database_url, echo=settings.DB_ECHO, **kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def get_engine() -> Engine:
    """Get or create the database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        _engine = build_engine(settings.DATABASE_URL)
        logger.info(f"[DB] Engine created for {_engine.url.render_as_string(hide_password=True)}")
    return _engine


def get_session_local() -> sessionmaker:
    """Get or create the session factory (lazy initialization)"""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_local


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, rolled back on error."""
    session = get_session_local()()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all tables."""
    # Import registers the table classes on Base.metadata
    from app.models import tables  # noqa: F401

    Base.metadata.create_all(bind=engine or get_engine())


def close_db() -> None:
    global _engine, _session_local
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_local = None
