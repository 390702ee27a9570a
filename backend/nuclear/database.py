"""
SQLAlchemy engine and session. Supports PostgreSQL and SQLite (for local testing without Docker).
Sync usage; one session per request via get_db. Multi-step mutations go through atomic().
"""
import logging
import sqlite3
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from nuclear.config import settings

logger = logging.getLogger(__name__)

_is_sqlite = "sqlite" in settings.database_url
_connect_args = {"check_same_thread": False} if _is_sqlite else {}
engine = create_engine(
    settings.database_url,
    pool_pre_ping=not _is_sqlite,
    connect_args=_connect_args,
    echo=False,  # Set True for SQL logging during development
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

_ATOMIC_DEPTH_KEY = "atomic_depth"


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


@event.listens_for(Engine, "connect")
def _configure_sqlite(dbapi_connection, connection_record):
    """
    SQLite ignores FOREIGN KEY clauses unless asked; turn enforcement on for every connection.
    Its built-in lower() folds ASCII only, so replace it with Python's for case-insensitive search.
    """
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def init_db():
    """When using SQLite: create tables. Call once at app startup (PostgreSQL uses Alembic)."""
    if not _is_sqlite:
        return
    # Import all models so they register with Base before create_all
    from nuclear.models import (  # noqa: F401
        user, block, folder, quiz, question, topic, fill_in_the_blank, points_update,
    )
    Base.metadata.create_all(bind=engine)
    logger.info("SQLite schema ready at %s", settings.database_url)


def check_database(db: Session) -> None:
    """Round-trip a trivial query; raises on failure."""
    db.execute(text("SELECT 1"))


def in_atomic(db: Session) -> bool:
    return db.info.get(_ATOMIC_DEPTH_KEY, 0) > 0


@contextmanager
def atomic(db: Session):
    """
    Transaction boundary for multi-step mutations (e.g. a block and its topics).
    Access functions flush instead of committing while inside; the outermost block commits,
    or rolls everything back if anything raises. Nested use joins the outer transaction.
    """
    depth = db.info.get(_ATOMIC_DEPTH_KEY, 0)
    db.info[_ATOMIC_DEPTH_KEY] = depth + 1
    try:
        yield db
        if depth == 0:
            db.commit()
    except Exception:
        if depth == 0:
            db.rollback()
        raise
    finally:
        db.info[_ATOMIC_DEPTH_KEY] = depth


def get_db():
    """Dependency: yield a DB session, close after request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
