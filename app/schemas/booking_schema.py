from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime

from utils.dates import to_naive_utc


class GuestDetails(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=5, max_length=20)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    number_of_guests: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid")


class GuestDetailsUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, min_length=5, max_length=20)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    number_of_guests: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(extra="forbid")


class RoomSelection(BaseModel):
    room_id: int
    quantity: int = Field(default=1, ge=1)

    model_config = ConfigDict(extra="forbid")


class BookingCreate(BaseModel):
    hotel_id: int
    rooms: List[RoomSelection] = Field(min_length=1)
    guest_details: GuestDetails
    check_in_date: datetime
    check_out_date: datetime
    special_requests: Optional[str] = Field(default=None, max_length=2000)

    model_config = ConfigDict(extra="forbid")

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def normalize_dates(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_in_date >= self.check_out_date:
            raise ValueError("Check-out date must be after check-in date")
        return self


class BookingUpdate(BaseModel):
    """Only guest details and special requests can change after booking."""

    guest_details: Optional[GuestDetailsUpdate] = None
    special_requests: Optional[str] = Field(default=None, max_length=2000)

    model_config = ConfigDict(extra="forbid")


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="forbid")
