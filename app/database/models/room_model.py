from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from database.init import Base
from enums.room_type import RoomCategory
from utils.dates import utcnow


class RoomType(Base):
    __tablename__ = "room_types"
    __table_args__ = (
        CheckConstraint("available_rooms >= 0", name="ck_room_available_non_negative"),
        CheckConstraint("available_rooms <= total_rooms", name="ck_room_available_le_total"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), index=True, nullable=False)
    room_type = Column(String(20), default=RoomCategory.DOUBLE.value, nullable=False)
    capacity_adults = Column(Integer, default=1, nullable=False)
    capacity_children = Column(Integer, default=0, nullable=False)
    base_price = Column(Float, nullable=False)
    price_per_additional_guest = Column(Float, default=0, nullable=False)
    total_rooms = Column(Integer, nullable=False)
    # Only the inventory ledger writes this column
    available_rooms = Column(Integer, nullable=False)
    amenities = Column(JSON, default=list)
    description = Column(Text, nullable=True)
    bed_type = Column(String(20), nullable=True)
    size = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    discount_percentage = Column(Float, default=0, nullable=False)
    discount_valid_from = Column(DateTime, nullable=True)
    discount_valid_to = Column(DateTime, nullable=True)

    # Shown on room listings only, bookings snapshot the hotel policy
    free_cancel_days = Column(Integer, default=0, nullable=False)
    cancellation_description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    hotel = relationship("Hotel", back_populates="rooms")
