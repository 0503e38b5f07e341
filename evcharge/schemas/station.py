"""
Schemas for charging stations
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .charger import ChargerResponse


class StationRequest(BaseModel):
    """Create/update payload. station_code is only read on create."""
    station_code: Optional[str] = Field(None, max_length=64)
    name: str = Field(..., max_length=255)
    address: str = Field(..., max_length=500)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    operator_name: Optional[str] = None
    contact_number: Optional[str] = None
    operating_hours: Optional[str] = None

    @field_validator("name", "address")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


class StationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    station_code: Optional[str] = None
    name: str
    address: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    operator_name: Optional[str] = None
    contact_number: Optional[str] = None
    operating_hours: Optional[str] = None
    chargers: List[ChargerResponse] = []
