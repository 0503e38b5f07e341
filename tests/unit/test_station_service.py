"""
Tests for station CRUD, nearby search and the delete cascade
"""
import math

import pytest
from sqlalchemy.orm import Session

from evcharge.core.errors import BusinessError, ErrorCode
from evcharge.models import Charger, ChargerType, ChargingSession, ChargingStation
from evcharge.services import charger_service, session_service, station_service
from evcharge.services.station_service import EARTH_RADIUS_KM, spherical_distance_km


def _station(db, name, lat, lng, code=None):
    return station_service.create_station(
        db, name=name, address=f"{name} address", station_code=code, latitude=lat, longitude=lng
    )


class TestSphericalDistance:

    def test_same_point_is_zero(self):
        assert spherical_distance_km(37.5665, 126.9780, 37.5665, 126.9780) == 0.0

    def test_one_degree_of_latitude(self):
        expected = EARTH_RADIUS_KM * math.radians(1.0)
        assert spherical_distance_km(37.0, 127.0, 38.0, 127.0) == pytest.approx(expected, rel=1e-9)

    def test_seoul_city_hall_to_gangnam(self):
        distance = spherical_distance_km(37.5665, 126.9780, 37.4979, 127.0276)
        assert 8.0 < distance < 9.5


class TestFindNearby:

    def test_nearest_first_and_radius_filter(self, db: Session):
        far = _station(db, "Far", 37.60, 126.9780)
        near = _station(db, "Near", 37.5670, 126.9780)
        mid = _station(db, "Mid", 37.58, 126.9780)

        result = station_service.find_nearby(db, 37.5665, 126.9780, 2.0)

        assert [s.id for s in result] == [near.id, mid.id]
        assert far.id not in [s.id for s in result]

    def test_radius_boundary_is_exclusive(self, db: Session):
        target = _station(db, "Edge", 38.0, 127.0)
        exact = spherical_distance_km(37.0, 127.0, 38.0, 127.0)

        assert station_service.find_nearby(db, 37.0, 127.0, exact) == []
        assert [s.id for s in station_service.find_nearby(db, 37.0, 127.0, exact + 1e-6)] == [target.id]

    def test_stations_without_coordinates_are_skipped(self, db: Session):
        station_service.create_station(db, name="No coords", address="somewhere")
        assert station_service.find_nearby(db, 37.5, 127.0, 20000.0) == []

    def test_equal_distances_ordered_by_id(self, db: Session):
        first = _station(db, "A", 37.5, 127.0)
        second = _station(db, "B", 37.5, 127.0)
        result = station_service.find_nearby(db, 37.5, 127.0, 1.0)
        assert [s.id for s in result] == [first.id, second.id]


class TestFindAll:

    def test_pagination(self, db: Session):
        for i in range(5):
            _station(db, f"S{i}", 37.0, 127.0)

        page = station_service.find_all(db, page=1, size=2)

        assert [s.name for s in page.content] == ["S2", "S3"]
        assert page.total_elements == 5
        assert page.total_pages == 3

    def test_page_past_the_end_is_empty(self, db: Session):
        _station(db, "Only", 37.0, 127.0)
        page = station_service.find_all(db, page=3, size=10)
        assert page.content == []
        assert page.total_elements == 1


class TestCreateUpdate:

    def test_duplicate_station_code(self, db: Session):
        _station(db, "A", 37.0, 127.0, code="DUP")
        with pytest.raises(BusinessError) as exc_info:
            _station(db, "B", 37.0, 127.0, code="DUP")
        assert exc_info.value.code == ErrorCode.DUPLICATE_STATION_CODE

    def test_stations_without_code_do_not_collide(self, db: Session):
        _station(db, "A", 37.0, 127.0)
        _station(db, "B", 37.0, 127.0)
        assert db.query(ChargingStation).count() == 2

    def test_update_replaces_fields_but_not_code(self, db: Session, station):
        updated = station_service.update_station(
            db, station.id, name="Renamed", address="New address", latitude=None,
            longitude=None, station_code="IGNORED",
        )
        assert updated.name == "Renamed"
        assert updated.latitude is None
        assert updated.station_code == "ST0001"

    def test_update_unknown_station(self, db: Session):
        with pytest.raises(BusinessError) as exc_info:
            station_service.update_station(db, 999, name="x", address="y")
        assert exc_info.value.code == ErrorCode.STATION_NOT_FOUND


class TestDeleteStation:

    def test_delete_cascades_to_chargers_and_sessions(self, db: Session, station, charger):
        other = _station(db, "Other", 37.0, 127.0)
        kept = charger_service.create_charger(db, other.id, ChargerType.AC_SLOW)
        session = session_service.start_charging(db, charger.id)
        session_service.complete_charging(db, session.id, 1.0, 1.0)
        session_service.start_charging(db, kept.id)

        # Deleted rows cannot be read back through their instances
        station_id, charger_id, kept_id = station.id, charger.id, kept.id

        station_service.delete_station(db, station_id)

        assert db.query(ChargingStation).filter_by(id=station_id).first() is None
        assert db.query(Charger).filter_by(station_id=station_id).count() == 0
        assert db.query(ChargingSession).filter_by(charger_id=charger_id).count() == 0
        # Unrelated station untouched
        assert db.query(Charger).filter_by(id=kept_id).count() == 1
        assert db.query(ChargingSession).filter_by(charger_id=kept_id).count() == 1

    def test_delete_unknown_station(self, db: Session):
        with pytest.raises(BusinessError) as exc_info:
            station_service.delete_station(db, 999)
        assert exc_info.value.code == ErrorCode.STATION_NOT_FOUND


class TestChargers:

    def test_new_charger_starts_available(self, db: Session, charger):
        assert charger.status.value == "AVAILABLE"
        assert charger.version == 1

    def test_list_chargers_of_unknown_station(self, db: Session):
        with pytest.raises(BusinessError) as exc_info:
            charger_service.list_chargers(db, 999)
        assert exc_info.value.code == ErrorCode.STATION_NOT_FOUND

    def test_create_charger_on_unknown_station(self, db: Session):
        with pytest.raises(BusinessError) as exc_info:
            charger_service.create_charger(db, 999, ChargerType.AC_SLOW)
        assert exc_info.value.code == ErrorCode.STATION_NOT_FOUND

    def test_status_change_bumps_version(self, db: Session, charger):
        from evcharge.models import ChargerStatus
        updated = charger_service.change_status(db, charger.id, ChargerStatus.OUT_OF_SERVICE)
        assert updated.status == ChargerStatus.OUT_OF_SERVICE
        assert updated.version == 2
