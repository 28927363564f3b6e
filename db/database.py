"""Database connection, unit of work and initialization."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from config import DATA_DIR, DB_PATH, DB_POOL_SIZE
from db.models import Base

logger = logging.getLogger(__name__)

_engine: Engine | None = None
_SessionFactory: sessionmaker[Session] | None = None
_write_lock = threading.Lock()


def get_engine() -> Engine:
    """Get or create the SQLAlchemy engine.

    The pool is capped at DB_POOL_SIZE connections with no overflow, so with
    the default of 1 every statement is serialized through one connection.
    """
    global _engine
    if _engine is None:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            echo=False,
            pool_size=DB_POOL_SIZE,
            max_overflow=0,
            connect_args={"check_same_thread": False},
        )
    return _engine


def get_session() -> Session:
    """Create a new database session."""
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=get_engine(), expire_on_commit=False)
    return _SessionFactory()


@contextmanager
def unit_of_work() -> Iterator[Session]:
    """Run a block of writes atomically under the single-writer lock.

    Commits when the block finishes, rolls back and re-raises on any error.
    Never do network I/O inside this block.
    """
    with _write_lock:
        session = get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


def init_db() -> None:
    """Create all tables if they don't exist, then run migrations."""
    from db.migrations import run_migrations

    engine = get_engine()
    Base.metadata.create_all(engine)
    run_migrations(engine)


def dispose_engine() -> None:
    """Close pooled connections and forget the engine."""
    global _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
        logger.debug("Disposed engine for %s", DB_PATH)
    _engine = None
    _SessionFactory = None
