from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional
from datetime import datetime

from enums.package_status import PackageCategory, PackageStatus


class GroupDiscount(BaseModel):
    min_people: int = Field(ge=1)
    max_people: int = Field(ge=1)
    discount_percentage: float = Field(ge=0, le=100)

    @model_validator(mode="after")
    def check_band(self):
        if self.min_people > self.max_people:
            raise ValueError("min_people cannot exceed max_people")
        return self


class PackageCreate(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    description: Optional[str] = None
    category: PackageCategory
    duration_days: int = Field(ge=1)
    duration_nights: int = Field(ge=0)
    base_price: float = Field(ge=0)
    discount_percentage: float = Field(default=0, ge=0, le=100)
    group_discounts: List[GroupDiscount] = []
    group_size_min: int = Field(default=1, ge=1)
    group_size_max: int = Field(ge=1)
    free_cancel_days: int = Field(default=7, ge=0)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_group_size(self):
        if self.group_size_min > self.group_size_max:
            raise ValueError("group_size_min cannot exceed group_size_max")
        return self


class PackageUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    description: Optional[str] = None
    category: Optional[PackageCategory] = None
    duration_days: Optional[int] = Field(default=None, ge=1)
    duration_nights: Optional[int] = Field(default=None, ge=0)
    base_price: Optional[float] = Field(default=None, ge=0)
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    group_discounts: Optional[List[GroupDiscount]] = None
    group_size_min: Optional[int] = Field(default=None, ge=1)
    group_size_max: Optional[int] = Field(default=None, ge=1)
    free_cancel_days: Optional[int] = Field(default=None, ge=0)
    status: Optional[PackageStatus] = None

    model_config = ConfigDict(extra="forbid")


class PackageQuoteRequest(BaseModel):
    number_of_people: int = Field(ge=1)


class PackageResponse(BaseModel):
    id: int
    title: str
    slug: str
    description: Optional[str] = None
    category: PackageCategory
    duration_days: int
    duration_nights: int
    display_duration: Optional[str] = None
    base_price: float
    discount_percentage: float
    group_discounts: List[GroupDiscount] = []
    group_size_min: int
    group_size_max: int
    free_cancel_days: int
    status: PackageStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PackageQuoteResponse(BaseModel):
    package_id: int
    title: str
    number_of_people: int
    price_per_person: float
    discount_percentage: float
    total_price: float
