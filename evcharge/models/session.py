from datetime import datetime
import enum
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, Index, Enum as SQLEnum
from ..db import Base


class SessionStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class ChargingSession(Base):
    """One charging occurrence on a charger, from start to completion"""
    __tablename__ = "charging_session"

    id = Column(Integer, primary_key=True, autoincrement=True)
    charger_id = Column(Integer, ForeignKey("charger.id"), nullable=False, index=True)

    start_time = Column(DateTime, nullable=False, default=datetime.utcnow)
    end_time = Column(DateTime, nullable=True)

    # Null while IN_PROGRESS, set together on completion
    energy_delivered_kwh = Column(Float, nullable=True)
    cost = Column(Float, nullable=True)

    status = Column(
        SQLEnum(SessionStatus, native_enum=False),
        nullable=False,
        default=SessionStatus.IN_PROGRESS,
        index=True,
    )

    __table_args__ = (
        Index("idx_session_charger_start", "charger_id", "start_time"),
    )

    @classmethod
    def start(cls, charger_id: int) -> "ChargingSession":
        return cls(
            charger_id=charger_id,
            start_time=datetime.utcnow(),
            status=SessionStatus.IN_PROGRESS,
        )

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.IN_PROGRESS

    def complete(self, energy_delivered_kwh: float, cost: float) -> None:
        """Close the session. Callers check is_open first."""
        if not self.is_open:
            raise ValueError(f"Session {self.id} is not in progress")
        self.end_time = datetime.utcnow()
        self.energy_delivered_kwh = energy_delivered_kwh
        self.cost = cost
        self.status = SessionStatus.COMPLETED
