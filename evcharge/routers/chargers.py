"""
Chargers v1 Router
Charger lookup, manual status changes and starting a charging session
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ApiResponse, ChargerResponse, ChargerStatusRequest, SessionResponse
from ..services import charger_service, session_service

router = APIRouter(prefix="/chargers", tags=["chargers"])


@router.get("/{charger_id}", response_model=ApiResponse[ChargerResponse])
def get_charger(charger_id: int, db: Session = Depends(get_db)):
    charger = charger_service.get_charger(db, charger_id)
    return ApiResponse.ok(ChargerResponse.model_validate(charger))


@router.patch("/{charger_id}/status", response_model=ApiResponse[ChargerResponse])
def change_status(charger_id: int, payload: ChargerStatusRequest, db: Session = Depends(get_db)):
    charger = charger_service.change_status(db, charger_id, payload.status)
    return ApiResponse.ok(ChargerResponse.model_validate(charger))


@router.post(
    "/{charger_id}/sessions",
    response_model=ApiResponse[SessionResponse],
    status_code=status.HTTP_201_CREATED,
)
def start_session(charger_id: int, db: Session = Depends(get_db)):
    session = session_service.start_charging(db, charger_id)
    return ApiResponse.ok(SessionResponse.model_validate(session))
