"""
Application lifespan management for startup and shutdown events
"""
import logging
from contextlib import asynccontextmanager

from .config import settings
from .db import SessionLocal, get_engine, init_db
from .jobs.seed_stations import seed_stations
from .utils.log import setup_logging

logger = logging.getLogger(__name__)


async def _seed_on_startup() -> None:
    """A failed seed never blocks startup; the API serves an empty catalogue."""
    db = SessionLocal()
    try:
        created = await seed_stations(db)
        logger.info(f"[Startup] Seeded {created} stations")
    except Exception as e:
        logger.error(f"[Startup] Station seed failed: {e}", exc_info=True)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app):
    """Manage application lifespan events"""
    setup_logging(settings.log_level)
    logger.info("Starting EV charging API...")

    try:
        init_db()
        logger.info("Database schema verified")
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    if settings.seed_on_startup:
        await _seed_on_startup()

    logger.info("Application startup completed successfully")

    yield

    logger.info("Shutting down EV charging API...")
    try:
        get_engine().dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Shutdown error: {e}")


__all__ = ["lifespan"]
