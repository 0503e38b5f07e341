"""
Station Service
Station CRUD, nearby search and the explicit station -> chargers -> sessions cascade
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.errors import BusinessError, ErrorCode
from ..db import unit_of_work
from ..models import Charger, ChargingSession, ChargingStation
from ..utils.log import log_event

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# Fields a station update may replace; station_code is fixed at creation
UPDATABLE_FIELDS = (
    "name",
    "address",
    "latitude",
    "longitude",
    "operator_name",
    "contact_number",
    "operating_hours",
)


@dataclass
class StationPage:
    content: List[ChargingStation]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total_elements / self.size)


def spherical_distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance using the spherical law of cosines."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    delta_lambda = math.radians(lng2) - math.radians(lng1)
    cos_angle = (
        math.cos(phi1) * math.cos(phi2) * math.cos(delta_lambda)
        + math.sin(phi1) * math.sin(phi2)
    )
    # Rounding can push identical points just past 1.0
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return EARTH_RADIUS_KM * math.acos(cos_angle)


def get_station(db: Session, station_id: int) -> ChargingStation:
    station = db.query(ChargingStation).filter(ChargingStation.id == station_id).first()
    if not station:
        raise BusinessError(ErrorCode.STATION_NOT_FOUND)
    return station


def find_all(db: Session, page: int = 0, size: int = 20) -> StationPage:
    """Offset/limit page of stations, ordered by primary key."""
    total = db.query(ChargingStation).count()
    stations = (
        db.query(ChargingStation)
        .order_by(ChargingStation.id.asc())
        .offset(page * size)
        .limit(size)
        .all()
    )
    return StationPage(content=stations, page=page, size=size, total_elements=total)


def find_nearby(db: Session, lat: float, lng: float, radius_km: float) -> List[ChargingStation]:
    """
    Stations strictly closer than radius_km to (lat, lng), nearest first.
    Stations without coordinates are never returned.
    """
    candidates = (
        db.query(ChargingStation)
        .filter(ChargingStation.latitude.isnot(None), ChargingStation.longitude.isnot(None))
        .all()
    )
    within: List[Tuple[float, ChargingStation]] = []
    for station in candidates:
        distance = spherical_distance_km(lat, lng, station.latitude, station.longitude)
        if distance < radius_km:
            within.append((distance, station))
    within.sort(key=lambda pair: (pair[0], pair[1].id))
    return [station for _, station in within]


def create_station(
    db: Session,
    name: str,
    address: str,
    station_code: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    operator_name: Optional[str] = None,
    contact_number: Optional[str] = None,
    operating_hours: Optional[str] = None,
) -> ChargingStation:
    """
    Create a station.

    Raises:
        BusinessError(DUPLICATE_STATION_CODE): If station_code is already taken
    """
    if station_code and db.query(ChargingStation).filter(
        ChargingStation.station_code == station_code
    ).first():
        raise BusinessError(ErrorCode.DUPLICATE_STATION_CODE)

    station = ChargingStation(
        station_code=station_code,
        name=name,
        address=address,
        latitude=latitude,
        longitude=longitude,
        operator_name=operator_name,
        contact_number=contact_number,
        operating_hours=operating_hours,
    )
    try:
        with unit_of_work(db):
            db.add(station)
    except IntegrityError:
        # Lost a race on the unique station_code index
        raise BusinessError(ErrorCode.DUPLICATE_STATION_CODE)
    db.refresh(station)
    logger.info(f"Created station {station.id} ({station.station_code})")
    return station


def update_station(db: Session, station_id: int, **fields) -> ChargingStation:
    """Replace a station's descriptive fields."""
    station = get_station(db, station_id)
    with unit_of_work(db):
        for key in UPDATABLE_FIELDS:
            if key in fields:
                setattr(station, key, fields[key])
    db.refresh(station)
    return station


def delete_station(db: Session, station_id: int) -> None:
    """
    Delete a station together with its chargers and their sessions.
    Children go first, all in one transaction.
    """
    station = get_station(db, station_id)
    with unit_of_work(db):
        charger_ids = [
            row.id for row in db.query(Charger.id).filter(Charger.station_id == station.id).all()
        ]
        session_count = 0
        if charger_ids:
            session_count = (
                db.query(ChargingSession)
                .filter(ChargingSession.charger_id.in_(charger_ids))
                .delete(synchronize_session=False)
            )
            db.query(Charger).filter(Charger.id.in_(charger_ids)).delete(synchronize_session=False)
        db.delete(station)

    log_event("station_deleted", {
        "station_id": station_id,
        "chargers": len(charger_ids),
        "sessions": session_count,
    })
