from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from enums.hotel_status import HotelStatus


class HotelCreate(BaseModel):
    name: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    city: str
    address: str
    free_cancel_days: int = Field(default=0, ge=0)
    cancellation_policy: Optional[str] = None
    check_in_time: str = "14:00"
    check_out_time: str = "11:00"

    model_config = ConfigDict(extra="forbid")


class HotelUpdate(BaseModel):
    """Fields an owner may change. Existing bookings keep the policy they were made under."""

    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=2000)
    city: Optional[str] = None
    address: Optional[str] = None
    free_cancel_days: Optional[int] = Field(default=None, ge=0)
    cancellation_policy: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class HotelReject(BaseModel):
    reason: str = Field(min_length=3, max_length=500)


class HotelResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    city: str
    address: str
    owner_id: int
    status: HotelStatus
    rejection_reason: Optional[str] = None
    free_cancel_days: int
    cancellation_policy: Optional[str] = None
    check_in_time: Optional[str] = None
    check_out_time: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
