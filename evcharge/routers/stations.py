"""
Stations v1 Router
Station CRUD, nearby search and the charger collection of a station
"""
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    ApiResponse,
    ChargerResponse,
    CreateChargerRequest,
    PageResponse,
    StationRequest,
    StationResponse,
)
from ..services import charger_service, station_service

router = APIRouter(prefix="/stations", tags=["stations"])


@router.get("", response_model=ApiResponse[PageResponse[StationResponse]])
def list_stations(
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    result = station_service.find_all(db, page=page, size=size)
    return ApiResponse.ok(PageResponse[StationResponse](
        content=[StationResponse.model_validate(s) for s in result.content],
        page=result.page,
        size=result.size,
        total_elements=result.total_elements,
        total_pages=result.total_pages,
    ))


@router.get("/nearby", response_model=ApiResponse[List[StationResponse]])
def nearby_stations(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(5.0, gt=0, description="Search radius in km"),
    db: Session = Depends(get_db),
):
    """Stations strictly within `radius` km, nearest first"""
    stations = station_service.find_nearby(db, lat, lng, radius)
    return ApiResponse.ok([StationResponse.model_validate(s) for s in stations])


@router.get("/{station_id}", response_model=ApiResponse[StationResponse])
def get_station(station_id: int, db: Session = Depends(get_db)):
    station = station_service.get_station(db, station_id)
    return ApiResponse.ok(StationResponse.model_validate(station))


@router.post("", response_model=ApiResponse[StationResponse], status_code=status.HTTP_201_CREATED)
def create_station(payload: StationRequest, db: Session = Depends(get_db)):
    """Create a station (ADMIN)"""
    station = station_service.create_station(db, **payload.model_dump())
    return ApiResponse.ok(StationResponse.model_validate(station))


@router.put("/{station_id}", response_model=ApiResponse[StationResponse])
def update_station(station_id: int, payload: StationRequest, db: Session = Depends(get_db)):
    station = station_service.update_station(
        db, station_id, **payload.model_dump(exclude={"station_code"})
    )
    return ApiResponse.ok(StationResponse.model_validate(station))


@router.delete("/{station_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_station(station_id: int, db: Session = Depends(get_db)):
    """Delete a station with its chargers and their sessions (ADMIN)"""
    station_service.delete_station(db, station_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{station_id}/chargers", response_model=ApiResponse[List[ChargerResponse]])
def list_chargers(station_id: int, db: Session = Depends(get_db)):
    chargers = charger_service.list_chargers(db, station_id)
    return ApiResponse.ok([ChargerResponse.model_validate(c) for c in chargers])


@router.post(
    "/{station_id}/chargers",
    response_model=ApiResponse[ChargerResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_charger(station_id: int, payload: CreateChargerRequest, db: Session = Depends(get_db)):
    charger = charger_service.create_charger(db, station_id, **payload.model_dump())
    return ApiResponse.ok(ChargerResponse.model_validate(charger))
