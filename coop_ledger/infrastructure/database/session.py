"""Database session management with connection pooling"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from coop_ledger.config import settings
from coop_ledger.domain.exceptions import InternalError, LedgerError
from coop_ledger.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str):
    if database_url.startswith("sqlite"):
        # SQLite connections are shared across FastAPI's threadpool
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables() -> None:
    """Create missing ledger tables"""
    Base.metadata.create_all(bind=engine)


def get_db() -> Session:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session, operation: str, *, commit: bool = True) -> Iterator[Session]:
    """
    Run a block as one atomic unit on the given session.

    Domain errors roll back and propagate unchanged. Anything else rolls back,
    is logged with its traceback, and surfaces as InternalError so raw
    persistence errors never reach callers.

    Args:
        db: Session the block writes through
        operation: Short label used in logs and the generic error message
        commit: False for read-only blocks, which only get the error wrapping
    """
    try:
        yield db
        if commit:
            db.commit()
    except LedgerError:
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.exception(f"Unexpected error {operation}", extra={"operation": operation})
        raise InternalError(f"Error {operation}") from e
