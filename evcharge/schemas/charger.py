"""
Schemas for chargers
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.charger import ChargerStatus, ChargerType, ConnectorType


class CreateChargerRequest(BaseModel):
    charger_code: Optional[str] = Field(None, max_length=64)
    type: ChargerType
    power_kw: Optional[float] = Field(None, gt=0, allow_inf_nan=False)
    connector_type: Optional[ConnectorType] = None


class ChargerStatusRequest(BaseModel):
    status: ChargerStatus


class ChargerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    station_id: int
    charger_code: Optional[str] = None
    type: ChargerType
    status: ChargerStatus
    power_kw: Optional[float] = None
    connector_type: Optional[ConnectorType] = None
    last_status_changed_at: datetime
