from datetime import datetime
import enum
from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum as SQLEnum
from ..db import Base


class ChargerType(str, enum.Enum):
    AC_SLOW = "AC_SLOW"
    DC_FAST = "DC_FAST"
    DC_COMBO = "DC_COMBO"


class ChargerStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    CHARGING = "CHARGING"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class ConnectorType(str, enum.Enum):
    AC_TYPE_1 = "AC_TYPE_1"
    CHADEMO = "CHADEMO"
    CCS1 = "CCS1"


class Charger(Base):
    """A single charging point. Status changes go through services.status_policy."""
    __tablename__ = "charger"

    id = Column(Integer, primary_key=True, autoincrement=True)
    charger_code = Column(String(64), nullable=True)
    type = Column(SQLEnum(ChargerType, native_enum=False), nullable=False)
    status = Column(
        SQLEnum(ChargerStatus, native_enum=False),
        nullable=False,
        default=ChargerStatus.AVAILABLE,
        index=True,
    )
    power_kw = Column(Float, nullable=True)
    connector_type = Column(SQLEnum(ConnectorType, native_enum=False), nullable=True)
    last_status_changed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Back-reference by id; a charger never moves to another station
    station_id = Column(Integer, ForeignKey("charging_station.id"), nullable=False, index=True)

    # Row version: concurrent writers of the same charger cannot both commit
    version = Column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}
