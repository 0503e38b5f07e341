"""
Sessions v1 Router
Completing sessions and querying a charger's session history
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ApiResponse, SessionCompleteRequest, SessionResponse
from ..services import session_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=ApiResponse[List[SessionResponse]])
def find_sessions(
    charger_id: int = Query(..., alias="chargerId"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    """Sessions of a charger; the date window applies only when both bounds are given"""
    sessions = session_service.find_sessions(db, charger_id, start_date, end_date)
    return ApiResponse.ok([SessionResponse.model_validate(s) for s in sessions])


@router.get("/{session_id}", response_model=ApiResponse[SessionResponse])
def get_session(session_id: int, db: Session = Depends(get_db)):
    session = session_service.get_session(db, session_id)
    return ApiResponse.ok(SessionResponse.model_validate(session))


@router.patch("/{session_id}/complete", response_model=ApiResponse[SessionResponse])
def complete_session(session_id: int, payload: SessionCompleteRequest, db: Session = Depends(get_db)):
    session = session_service.complete_charging(
        db, session_id, payload.energy_delivered_kwh, payload.cost
    )
    return ApiResponse.ok(SessionResponse.model_validate(session))
