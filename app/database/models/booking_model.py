from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Float, Boolean
from sqlalchemy.orm import relationship

from database.init import Base
from enums.booking_status import BookingStatus, BookingPaymentStatus
from utils.dates import utcnow


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(String(40), unique=True, index=True, nullable=False)
    confirmation_number = Column(String(40), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), index=True, nullable=False)

    # Guest details
    guest_first_name = Column(String(100), nullable=False)
    guest_last_name = Column(String(100), nullable=False)
    guest_email = Column(String(100), index=True, nullable=False)
    guest_phone = Column(String(20), nullable=False)
    guest_address = Column(String(255), nullable=True)
    guest_city = Column(String(100), nullable=True)
    guest_state = Column(String(100), nullable=True)
    guest_zip_code = Column(String(20), nullable=True)
    guest_country = Column(String(100), nullable=True)
    number_of_guests = Column(Integer, default=1, nullable=False)
    special_requests = Column(Text, nullable=True)

    check_in_date = Column(DateTime, nullable=False)
    check_out_date = Column(DateTime, nullable=False)
    number_of_nights = Column(Integer, nullable=False)

    # Pricing breakdown, frozen at creation
    room_charges = Column(Float, nullable=False)
    taxes_and_fees = Column(Float, default=0, nullable=False)
    discount = Column(Float, default=0, nullable=False)
    total_price = Column(Float, nullable=False)
    per_night_price = Column(Float, nullable=True)

    status = Column(String(20), default=BookingStatus.PENDING.value, index=True, nullable=False)
    payment_status = Column(String(20), default=BookingPaymentStatus.UNPAID.value, nullable=False)
    # Plain reference, payments.booking_id carries the foreign key
    payment_id = Column(Integer, nullable=True)

    cancellation_reason = Column(String(500), nullable=True)
    cancelled_at = Column(DateTime, nullable=True)
    cancelled_by = Column(String(10), nullable=True)
    cancellation_refund_amount = Column(Float, nullable=True)
    cancellation_refund_status = Column(String(20), nullable=True)

    # Snapshot of the hotel policy at booking time
    policy_free_cancel_days = Column(Integer, default=0, nullable=False)
    policy_description = Column(Text, nullable=True)

    is_modified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, onupdate=utcnow, nullable=True)
    deleted_at = Column(DateTime, nullable=True)

    user = relationship("User")
    hotel = relationship("Hotel")
    rooms = relationship(
        "BookingRoom",
        back_populates="booking",
        order_by="BookingRoom.position",
        cascade="all, delete-orphan",
    )
    modifications = relationship(
        "BookingModification",
        back_populates="booking",
        order_by="BookingModification.id",
        cascade="all, delete-orphan",
    )
    payments = relationship("Payment", back_populates="booking")


class BookingRoom(Base):
    __tablename__ = "booking_rooms"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), index=True, nullable=False)
    room_type_id = Column(Integer, ForeignKey("room_types.id"), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    room_type = Column(String(20), nullable=True)
    quantity = Column(Integer, default=1, nullable=False)
    base_price = Column(Float, nullable=False)
    final_price = Column(Float, nullable=False)

    booking = relationship("Booking", back_populates="rooms")
    room = relationship("RoomType")


class BookingModification(Base):
    __tablename__ = "booking_modifications"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), index=True, nullable=False)
    modified_at = Column(DateTime, default=utcnow, nullable=False)
    modified_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    changes = Column(String(255), nullable=False)

    booking = relationship("Booking", back_populates="modifications")
