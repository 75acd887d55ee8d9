from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from database.init import Base
from enums.hotel_status import HotelStatus
from utils.dates import utcnow


class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), index=True, nullable=False)
    description = Column(Text, nullable=True)
    city = Column(String(100), index=True, nullable=False)
    address = Column(String(255), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    status = Column(String(20), default=HotelStatus.PENDING.value, index=True, nullable=False)
    rejection_reason = Column(String(500), nullable=True)

    # Days before check-in within which cancelling still refunds in full
    free_cancel_days = Column(Integer, default=0, nullable=False)
    cancellation_policy = Column(Text, nullable=True)
    check_in_time = Column(String(5), default="14:00")
    check_out_time = Column(String(5), default="11:00")

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    owner = relationship("User", back_populates="hotels")
    rooms = relationship("RoomType", back_populates="hotel")
