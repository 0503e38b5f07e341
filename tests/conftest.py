"""
Pytest configuration and fixtures for the EV charging API tests.

Every test gets its own in-memory SQLite database; the app never touches the
dev database file.
"""
import os
import pathlib
import sys

# Must be set before evcharge.config is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["SEED_ON_STARTUP"] = "false"
os.environ.setdefault("OPENAPI_SERVICE_KEY", "")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_PASSWORD = "s3cret-pass"


@pytest.fixture(scope="function")
def engine(monkeypatch):
    """
    A private in-memory database, swapped in for the app's lazy engine so
    lifespan, the seeder and request handlers all see the same tables.
    """
    from evcharge import db as db_module
    from evcharge import models  # noqa: F401

    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    db_module.Base.metadata.create_all(bind=test_engine)
    monkeypatch.setattr(db_module, "_engine", test_engine)
    monkeypatch.setattr(
        db_module,
        "_SessionLocal",
        sessionmaker(autocommit=False, autoflush=False, bind=test_engine),
    )
    yield test_engine
    db_module.Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def db(engine):
    """Session on the test database; services commit through it."""
    from evcharge.db import SessionLocal

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db):
    """
    FastAPI TestClient sharing the test session with the db fixture.
    """
    from fastapi.testclient import TestClient
    from evcharge.db import get_db
    from evcharge.main import app
    from evcharge.obs.obs import clear_metrics

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    clear_metrics()
    # Lifespan is not entered here: it would dispose the shared in-memory engine
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def user(db):
    from evcharge.services.auth_service import create_member
    return create_member(db, "driver@example.com", TEST_PASSWORD, "Driver")


@pytest.fixture
def admin(db):
    from evcharge.security.rbac import Role
    from evcharge.services.auth_service import create_member
    return create_member(db, "admin@example.com", TEST_PASSWORD, "Admin", Role.ADMIN)


@pytest.fixture
def user_headers(user):
    from evcharge.core.security import create_access_token
    token = create_access_token(user.email, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin):
    from evcharge.core.security import create_access_token
    token = create_access_token(admin.email, admin.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def station(db):
    from evcharge.services.station_service import create_station
    return create_station(
        db,
        name="Gangnam Station Parking",
        address="396 Gangnam-daero, Seoul",
        station_code="ST0001",
        latitude=37.4979,
        longitude=127.0276,
    )


@pytest.fixture
def charger(db, station):
    from evcharge.models import ChargerType, ConnectorType
    from evcharge.services.charger_service import create_charger
    return create_charger(
        db,
        station.id,
        ChargerType.DC_COMBO,
        charger_code="01",
        power_kw=100.0,
        connector_type=ConnectorType.CCS1,
    )
