"""
Charger Service
Charger creation under a station and manual status changes
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.errors import BusinessError, ErrorCode
from ..db import unit_of_work
from ..models import Charger, ChargerStatus, ChargerType, ConnectorType
from ..utils.log import log_event
from .station_service import get_station
from .status_policy import apply_transition

logger = logging.getLogger(__name__)


def get_charger(db: Session, charger_id: int) -> Charger:
    charger = db.query(Charger).filter(Charger.id == charger_id).first()
    if not charger:
        raise BusinessError(ErrorCode.CHARGER_NOT_FOUND)
    return charger


def list_chargers(db: Session, station_id: int) -> List[Charger]:
    station = get_station(db, station_id)
    return (
        db.query(Charger)
        .filter(Charger.station_id == station.id)
        .order_by(Charger.id.asc())
        .all()
    )


def create_charger(
    db: Session,
    station_id: int,
    type: ChargerType,
    charger_code: Optional[str] = None,
    power_kw: Optional[float] = None,
    connector_type: Optional[ConnectorType] = None,
) -> Charger:
    """
    Add a charger to an existing station. New chargers always start AVAILABLE.

    Charger codes are not checked for uniqueness.
    """
    station = get_station(db, station_id)
    charger = Charger(
        station_id=station.id,
        charger_code=charger_code,
        type=type,
        status=ChargerStatus.AVAILABLE,
        power_kw=power_kw,
        connector_type=connector_type,
    )
    with unit_of_work(db):
        db.add(charger)
    db.refresh(charger)
    logger.info(f"Created charger {charger.id} on station {station.id}")
    return charger


def change_status(db: Session, charger_id: int, status: ChargerStatus) -> Charger:
    """
    Manually move a charger through the status policy.

    Raises:
        BusinessError(CHARGER_NOT_FOUND | INVALID_STATUS_TRANSITION)
    """
    charger = get_charger(db, charger_id)
    previous = charger.status
    try:
        with unit_of_work(db):
            apply_transition(charger, status)
    except StaleDataError:
        raise BusinessError(
            ErrorCode.INVALID_STATUS_TRANSITION,
            f"Charger {charger_id} status was changed concurrently",
        )
    db.refresh(charger)
    log_event("charger_status_changed", {
        "charger_id": charger.id,
        "from": previous.value,
        "to": charger.status.value,
    })
    return charger
