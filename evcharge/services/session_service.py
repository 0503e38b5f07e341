"""
Session Service
Starts and completes charging sessions, keeping the charger's status in step.

Each operation re-reads current state, validates, and then writes the session
and the charger in a single transaction. Nothing is written when a check fails.
"""
import logging
import math
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..core.errors import BusinessError, ErrorCode
from ..db import unit_of_work
from ..models import Charger, ChargerStatus, ChargingSession
from ..utils.log import log_event
from .status_policy import apply_transition

logger = logging.getLogger(__name__)


def _positive_amount(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def get_session(db: Session, session_id: int) -> ChargingSession:
    session = db.query(ChargingSession).filter(ChargingSession.id == session_id).first()
    if not session:
        raise BusinessError(ErrorCode.SESSION_NOT_FOUND)
    return session


def start_charging(db: Session, charger_id: int) -> ChargingSession:
    """
    Occupy an AVAILABLE charger with a new IN_PROGRESS session.

    The charger row is locked for the transaction where the database supports
    it, and its version column rejects a second writer that read the same
    AVAILABLE state; that writer fails with CHARGER_NOT_AVAILABLE.

    Raises:
        BusinessError(CHARGER_NOT_FOUND): No such charger
        BusinessError(CHARGER_NOT_AVAILABLE): Charger is CHARGING or OUT_OF_SERVICE
    """
    try:
        with unit_of_work(db):
            charger = (
                db.query(Charger)
                .filter(Charger.id == charger_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if not charger:
                raise BusinessError(ErrorCode.CHARGER_NOT_FOUND)
            if charger.status != ChargerStatus.AVAILABLE:
                raise BusinessError(ErrorCode.CHARGER_NOT_AVAILABLE)

            apply_transition(charger, ChargerStatus.CHARGING)
            session = ChargingSession.start(charger.id)
            db.add(session)
    except StaleDataError:
        logger.warning(f"Lost race to start charging on charger {charger_id}")
        raise BusinessError(ErrorCode.CHARGER_NOT_AVAILABLE)

    db.refresh(session)
    log_event("session_started", {"session_id": session.id, "charger_id": charger_id})
    return session


def complete_charging(
    db: Session,
    session_id: int,
    energy_delivered_kwh: Optional[float],
    cost: Optional[float],
) -> ChargingSession:
    """
    Close an IN_PROGRESS session and release its charger back to AVAILABLE.

    Raises:
        BusinessError(SESSION_NOT_FOUND): No such session
        BusinessError(SESSION_ALREADY_COMPLETED): Session is not IN_PROGRESS
        BusinessError(VALIDATION_ERROR): Energy or cost missing, not finite or not positive
        BusinessError(INVALID_STATUS_TRANSITION): Charger cannot return to AVAILABLE
    """
    problems = []
    if not _positive_amount(energy_delivered_kwh):
        problems.append("energy_delivered_kwh: must be a positive number")
    if not _positive_amount(cost):
        problems.append("cost: must be a positive number")
    if problems:
        raise BusinessError(ErrorCode.VALIDATION_ERROR, ", ".join(problems))

    try:
        with unit_of_work(db):
            session = (
                db.query(ChargingSession)
                .filter(ChargingSession.id == session_id)
                .populate_existing()
                .first()
            )
            if not session:
                raise BusinessError(ErrorCode.SESSION_NOT_FOUND)
            if not session.is_open:
                raise BusinessError(ErrorCode.SESSION_ALREADY_COMPLETED)

            charger = (
                db.query(Charger)
                .filter(Charger.id == session.charger_id)
                .with_for_update()
                .populate_existing()
                .first()
            )
            if not charger:
                raise BusinessError(ErrorCode.CHARGER_NOT_FOUND)

            session.complete(energy_delivered_kwh, cost)
            apply_transition(charger, ChargerStatus.AVAILABLE)
    except StaleDataError:
        logger.warning(f"Charger changed while completing session {session_id}")
        raise BusinessError(
            ErrorCode.INVALID_STATUS_TRANSITION,
            "Charger status changed concurrently; reload and retry",
        )

    db.refresh(session)
    log_event("session_completed", {
        "session_id": session.id,
        "charger_id": session.charger_id,
        "energy_delivered_kwh": session.energy_delivered_kwh,
        "cost": session.cost,
    })
    return session


def find_sessions(
    db: Session,
    charger_id: int,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
) -> List[ChargingSession]:
    """
    Sessions of one charger, oldest first. The start_time window applies only
    when both bounds are given.
    """
    query = db.query(ChargingSession).filter(ChargingSession.charger_id == charger_id)
    if start_date is not None and end_date is not None:
        query = query.filter(ChargingSession.start_time.between(start_date, end_date))
    return query.order_by(ChargingSession.id.asc()).all()
