"""
Logging helpers: process-wide setup and structured domain event lines.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")

_event_logger = logging.getLogger("evcharge.events")


def setup_logging(level: str = "INFO") -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def log_event(event_name: str, payload: Dict[str, Any]) -> None:
    """
    Log a domain event as a single compact JSON line.

    Args:
        event_name: Event name (e.g., "session_started", "station_deleted")
        payload: Event payload dictionary
    """
    log_data = {
        "event": event_name,
        "ts": datetime.utcnow().isoformat(),
        **payload,
    }
    _event_logger.info(json.dumps(log_data, separators=(",", ":"), default=str))
