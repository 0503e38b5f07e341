from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, Index
from sqlalchemy.orm import relationship
from ..db import Base


class ChargingStation(Base):
    """A physical site holding one or more chargers"""
    __tablename__ = "charging_station"

    id = Column(Integer, primary_key=True, autoincrement=True)
    station_code = Column(String(64), unique=True, nullable=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Operator metadata
    operator_name = Column(String(255), nullable=True)
    contact_number = Column(String(64), nullable=True)
    operating_hours = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Lookup only; chargers are created and deleted by the service layer
    chargers = relationship("Charger", order_by="Charger.id", viewonly=True)

    __table_args__ = (
        Index("idx_station_lat_lng", "latitude", "longitude"),
    )
