"""
Database configuration with lazy initialization.

The engine is created on first access so importing the app never blocks on
an unreachable database.
"""
import logging
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from .config import settings

logger = logging.getLogger(__name__)

_engine = None
_SessionLocal = None

Base = declarative_base()


def get_engine():
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        logger.info(f"Creating database engine for: {settings.database_url[:30]}...")
        connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
    return _engine


def get_session_local():
    """Get or create the SessionLocal class."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def SessionLocal() -> Session:
    return get_session_local()()


def get_db():
    """
    Dependency that provides a database session.
    One session per request; it is the request's unit of work.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session):
    """Commit everything done inside the block, or nothing."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise


def init_db() -> None:
    """Create all tables (development / SQLite convenience)."""
    from . import models  # noqa: F401  registers tables on Base.metadata
    Base.metadata.create_all(bind=get_engine())
