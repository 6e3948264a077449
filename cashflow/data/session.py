"""
Session management for SQLAlchemy.

Provides:
- Engine creation from storage settings
- Lifecycle management (init_db, close_db)
- A transactional session context manager
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from cashflow.data.config import StorageSettings, get_storage_settings
from cashflow.data.models import Base

logger = logging.getLogger(__name__)

# Global engine (initialized once)
_engine: Optional[Engine] = None


def create_db_engine(database_url: Optional[str] = None, settings: Optional[StorageSettings] = None) -> Engine:
    """Create an engine for the given URL, or the configured one."""
    settings = settings or get_storage_settings()
    url = database_url or settings.database_url
    logger.info("Creating database engine: %s", url.split("@")[-1])
    return create_engine(url, **settings.get_engine_kwargs())


def init_db(database_url: Optional[str] = None, settings: Optional[StorageSettings] = None) -> Engine:
    """
    Initialize the global engine and create missing tables.

    Safe to call more than once; the first engine is reused.
    """
    global _engine

    if _engine is None:
        _engine = create_db_engine(database_url, settings)
        Base.metadata.create_all(_engine)
        logger.info("Database initialized successfully")
    return _engine


def get_engine() -> Engine:
    """
    Get the global engine.

    Raises:
        RuntimeError: If engine not initialized (call init_db first)
    """
    if _engine is None:
        raise RuntimeError("Database engine not initialized. Call init_db() first.")
    return _engine


def close_db() -> None:
    """Dispose of the global engine."""
    global _engine

    if _engine is not None:
        logger.info("Closing database connection")
        _engine.dispose()
        _engine = None


@contextmanager
def session_scope(engine: Optional[Engine] = None) -> Iterator[Session]:
    """
    Context manager for database sessions.

    Usage:
        with session_scope(engine) as session:
            row = session.get(SavedGame, 1)

    Auto-commits on success, rolls back on exception.
    """
    factory = sessionmaker(bind=engine or get_engine(), expire_on_commit=False, autoflush=False)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
