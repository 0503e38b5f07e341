"""
Tests for session orchestration: start/complete keep charger status in step
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from evcharge.core.errors import BusinessError, ErrorCode
from evcharge.models import Charger, ChargerStatus, ChargingSession, SessionStatus
from evcharge.services import charger_service, session_service


def _charger_state(db, charger):
    db.refresh(charger)
    return (charger.status, charger.last_status_changed_at, charger.version)


def _session_state(db, session):
    db.refresh(session)
    return (session.status, session.end_time, session.energy_delivered_kwh, session.cost)


class TestStartCharging:

    def test_start_occupies_charger(self, db: Session, charger):
        session = session_service.start_charging(db, charger.id)

        assert session.status == SessionStatus.IN_PROGRESS
        assert session.end_time is None
        assert session.energy_delivered_kwh is None
        db.refresh(charger)
        assert charger.status == ChargerStatus.CHARGING

    def test_start_on_busy_charger_fails_and_writes_nothing(self, db: Session, charger):
        running = session_service.start_charging(db, charger.id)
        charger_before = _charger_state(db, charger)
        session_before = _session_state(db, running)

        with pytest.raises(BusinessError) as exc_info:
            session_service.start_charging(db, charger.id)

        assert exc_info.value.code == ErrorCode.CHARGER_NOT_AVAILABLE
        assert db.query(ChargingSession).count() == 1
        assert _charger_state(db, charger) == charger_before
        assert _session_state(db, running) == session_before

    def test_start_on_out_of_service_charger_fails(self, db: Session, charger):
        charger_service.change_status(db, charger.id, ChargerStatus.OUT_OF_SERVICE)
        charger_before = _charger_state(db, charger)

        with pytest.raises(BusinessError) as exc_info:
            session_service.start_charging(db, charger.id)

        assert exc_info.value.code == ErrorCode.CHARGER_NOT_AVAILABLE
        assert db.query(ChargingSession).count() == 0
        assert _charger_state(db, charger) == charger_before
        assert charger_before[0] == ChargerStatus.OUT_OF_SERVICE

    def test_start_on_unknown_charger(self, db: Session):
        with pytest.raises(BusinessError) as exc_info:
            session_service.start_charging(db, 999)
        assert exc_info.value.code == ErrorCode.CHARGER_NOT_FOUND

    def test_lost_race_maps_to_not_available(self, db: Session, charger, monkeypatch):
        def stale_commit():
            raise StaleDataError("version mismatch")

        monkeypatch.setattr(db, "commit", stale_commit)
        with pytest.raises(BusinessError) as exc_info:
            session_service.start_charging(db, charger.id)
        assert exc_info.value.code == ErrorCode.CHARGER_NOT_AVAILABLE


class TestCompleteCharging:

    def test_complete_releases_charger(self, db: Session, charger):
        started = session_service.start_charging(db, charger.id)

        done = session_service.complete_charging(db, started.id, 12.5, 4500.0)

        assert done.status == SessionStatus.COMPLETED
        assert done.end_time is not None
        assert done.end_time >= done.start_time
        assert done.energy_delivered_kwh == 12.5
        assert done.cost == 4500.0
        db.refresh(charger)
        assert charger.status == ChargerStatus.AVAILABLE

    def test_complete_twice_fails_without_touching_the_next_occupant(self, db: Session, charger):
        started = session_service.start_charging(db, charger.id)
        session_service.complete_charging(db, started.id, 10.0, 3000.0)
        # Charger is busy again with a new session
        current = session_service.start_charging(db, charger.id)
        charger_before = _charger_state(db, charger)
        finished_before = _session_state(db, started)
        current_before = _session_state(db, current)

        with pytest.raises(BusinessError) as exc_info:
            session_service.complete_charging(db, started.id, 99.0, 99999.0)

        assert exc_info.value.code == ErrorCode.SESSION_ALREADY_COMPLETED
        assert charger_before[0] == ChargerStatus.CHARGING
        assert _charger_state(db, charger) == charger_before
        assert _session_state(db, started) == finished_before
        assert finished_before[2:] == (10.0, 3000.0)
        assert _session_state(db, current) == current_before

    @pytest.mark.parametrize("energy,cost,fragment", [
        (float("inf"), 100.0, "energy_delivered_kwh"),
        (5.0, float("inf"), "cost"),
        (float("nan"), 100.0, "energy_delivered_kwh"),
    ])
    def test_complete_rejects_non_finite_values(self, db: Session, charger, energy, cost, fragment):
        started = session_service.start_charging(db, charger.id)
        charger_before = _charger_state(db, charger)

        with pytest.raises(BusinessError) as exc_info:
            session_service.complete_charging(db, started.id, energy, cost)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert fragment in exc_info.value.detail
        assert _session_state(db, started) == (SessionStatus.IN_PROGRESS, None, None, None)
        assert _charger_state(db, charger) == charger_before

    @pytest.mark.parametrize("energy,cost,fragment", [
        (0, 100.0, "energy_delivered_kwh"),
        (-1.5, 100.0, "energy_delivered_kwh"),
        (5.0, 0, "cost"),
        (None, 100.0, "energy_delivered_kwh"),
    ])
    def test_complete_rejects_non_positive_values(self, db: Session, charger, energy, cost, fragment):
        started = session_service.start_charging(db, charger.id)

        with pytest.raises(BusinessError) as exc_info:
            session_service.complete_charging(db, started.id, energy, cost)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR
        assert fragment in exc_info.value.detail
        db.refresh(started)
        assert started.status == SessionStatus.IN_PROGRESS

    def test_validation_reports_every_bad_field(self, db: Session, charger):
        started = session_service.start_charging(db, charger.id)
        with pytest.raises(BusinessError) as exc_info:
            session_service.complete_charging(db, started.id, 0, 0)
        assert "energy_delivered_kwh" in exc_info.value.detail
        assert "cost" in exc_info.value.detail

    def test_complete_unknown_session(self, db: Session):
        with pytest.raises(BusinessError) as exc_info:
            session_service.complete_charging(db, 404, 1.0, 1.0)
        assert exc_info.value.code == ErrorCode.SESSION_NOT_FOUND

    def test_out_of_service_while_charging_still_completes(self, db: Session, charger):
        started = session_service.start_charging(db, charger.id)
        charger_service.change_status(db, charger.id, ChargerStatus.OUT_OF_SERVICE)

        session_service.complete_charging(db, started.id, 3.0, 900.0)

        db.refresh(charger)
        assert charger.status == ChargerStatus.AVAILABLE


class TestFindSessions:

    def _session_at(self, db, charger_id, start_time):
        session = ChargingSession(
            charger_id=charger_id,
            start_time=start_time,
            status=SessionStatus.COMPLETED,
        )
        db.add(session)
        db.commit()
        return session

    def test_date_window_applies_only_with_both_bounds(self, db: Session, charger):
        base = datetime(2024, 5, 1, 12, 0, 0)
        early = self._session_at(db, charger.id, base - timedelta(days=10))
        inside = self._session_at(db, charger.id, base)

        window = session_service.find_sessions(
            db, charger.id, base - timedelta(days=1), base + timedelta(days=1)
        )
        assert [s.id for s in window] == [inside.id]

        only_start = session_service.find_sessions(db, charger.id, base - timedelta(days=1), None)
        assert [s.id for s in only_start] == [early.id, inside.id]

    def test_unknown_charger_yields_empty_list(self, db: Session):
        assert session_service.find_sessions(db, 12345) == []


def test_version_column_rejects_stale_writer(tmp_path):
    """Two sessions read the same charger; the second writer must fail."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from evcharge.db import Base
    from evcharge.models import ChargerType, ChargingStation

    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    Factory = sessionmaker(bind=engine)

    setup = Factory()
    station = ChargingStation(name="S", address="A")
    setup.add(station)
    setup.flush()
    setup.add(Charger(station_id=station.id, type=ChargerType.AC_SLOW))
    setup.commit()
    setup.close()

    first, second = Factory(), Factory()
    try:
        a = first.query(Charger).one()
        b = second.query(Charger).one()
        assert a.version == b.version == 1

        a.status = ChargerStatus.CHARGING
        first.commit()

        b.status = ChargerStatus.CHARGING
        with pytest.raises(StaleDataError):
            second.commit()
    finally:
        first.close()
        second.close()
        engine.dispose()
