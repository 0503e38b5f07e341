"""
Models package - organized by domain
"""
from .station import ChargingStation
from .charger import Charger, ChargerType, ChargerStatus, ConnectorType
from .session import ChargingSession, SessionStatus
from .member import Member

__all__ = [
    "ChargingStation",
    "Charger",
    "ChargerType",
    "ChargerStatus",
    "ConnectorType",
    "ChargingSession",
    "SessionStatus",
    "Member",
]
