from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from datetime import datetime

from enums.room_type import RoomCategory, BedType


class RoomCreate(BaseModel):
    room_type: RoomCategory
    capacity_adults: int = Field(ge=1)
    capacity_children: int = Field(default=0, ge=0)
    base_price: float = Field(ge=0)
    price_per_additional_guest: float = Field(default=0, ge=0)
    total_rooms: int = Field(ge=0)
    amenities: List[str] = []
    description: Optional[str] = None
    bed_type: Optional[BedType] = None
    size: Optional[float] = Field(default=None, gt=0)
    free_cancel_days: int = Field(default=0, ge=0)
    cancellation_description: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RoomUpdate(BaseModel):
    """Fields an owner may change after creation. available_rooms is never set directly."""

    capacity_adults: Optional[int] = Field(default=None, ge=1)
    capacity_children: Optional[int] = Field(default=None, ge=0)
    base_price: Optional[float] = Field(default=None, ge=0)
    price_per_additional_guest: Optional[float] = Field(default=None, ge=0)
    total_rooms: Optional[int] = Field(default=None, ge=0)
    amenities: Optional[List[str]] = None
    description: Optional[str] = None
    bed_type: Optional[BedType] = None
    size: Optional[float] = Field(default=None, gt=0)
    is_active: Optional[bool] = None
    free_cancel_days: Optional[int] = Field(default=None, ge=0)
    cancellation_description: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RoomDiscount(BaseModel):
    percentage: float = Field(ge=0, le=100)
    valid_from: datetime
    valid_to: datetime

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_window(self):
        if self.valid_from >= self.valid_to:
            raise ValueError("valid_to must be after valid_from")
        return self


class RoomResponse(BaseModel):
    id: int
    hotel_id: int
    room_type: RoomCategory
    capacity_adults: int
    capacity_children: int
    base_price: float
    effective_price: Optional[float] = None
    price_per_additional_guest: float
    total_rooms: int
    available_rooms: int
    amenities: List[str] = []
    description: Optional[str] = None
    bed_type: Optional[BedType] = None
    size: Optional[float] = None
    is_active: bool
    discount_percentage: float
    discount_valid_from: Optional[datetime] = None
    discount_valid_to: Optional[datetime] = None
    free_cancel_days: int
    cancellation_description: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomStatsResponse(BaseModel):
    room_type: RoomCategory
    total_rooms: int
    available_rooms: int
    booked_rooms: int
    average_price: float
    room_count: int
