"""
Schemas for charging sessions
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.session import SessionStatus


class SessionCompleteRequest(BaseModel):
    energy_delivered_kwh: float = Field(..., gt=0, allow_inf_nan=False)
    cost: float = Field(..., gt=0, allow_inf_nan=False)


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    charger_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    energy_delivered_kwh: Optional[float] = None
    cost: Optional[float] = None
    status: SessionStatus
