"""Database connection and session management.

This module handles the database connection using SQLAlchemy and provides the
all-or-nothing unit of work used by multi-step write operations.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import DATA_DIR, DATABASE_URL, SQL_ECHO
from models.base import Base
# Import models to ensure they are registered with Base.metadata
import models  # noqa: F401

logger = logging.getLogger(__name__)


@event.listens_for(Engine, "connect")
def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """Turn on foreign key enforcement for SQLite connections.

    SQLite ignores FOREIGN KEY clauses unless the pragma is set on every
    connection. Other backends are left untouched.
    """
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if DATABASE_URL.startswith("sqlite"):
    if ":memory:" not in DATABASE_URL:
        # Ensure data directory exists
        DATA_DIR.mkdir(parents=True, exist_ok=True)
    engine = create_engine(
        DATABASE_URL, echo=SQL_ECHO, connect_args={"check_same_thread": False}
    )
else:
    engine = create_engine(DATABASE_URL, echo=SQL_ECHO)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=bind)
    logger.info("Database schema ready: %s", bind.url)


def get_db() -> Generator[Session, None, None]:
    """Yield a request-scoped database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Run a block of writes as a single transaction.

    Commits when the block exits normally. Any exception rolls back every
    write made in the block and is re-raised to the caller.

    Args:
        db: Session the writes are issued on.

    Yields:
        The same session.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
