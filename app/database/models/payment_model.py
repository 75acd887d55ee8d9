from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON, Text
from sqlalchemy.orm import relationship

from database.init import Base
from enums.payment_status import PaymentStatus, RefundStatus
from utils.dates import utcnow


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    transaction_id = Column(String(40), unique=True, index=True, nullable=False)
    booking_id = Column(Integer, ForeignKey("bookings.id"), index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    payment_method = Column(String(20), nullable=False)

    card_last4 = Column(String(4), nullable=True)
    card_brand = Column(String(20), nullable=True)
    upi_id = Column(String(100), nullable=True)
    bank_name = Column(String(100), nullable=True)
    wallet_name = Column(String(100), nullable=True)

    status = Column(String(20), default=PaymentStatus.INITIATED.value, index=True, nullable=False)

    gateway = Column(String(50), nullable=True)
    gateway_transaction_id = Column(String(100), index=True, nullable=True)
    gateway_reference_id = Column(String(100), nullable=True)
    gateway_response = Column(JSON, nullable=True)

    refund_id = Column(String(40), nullable=True)
    refund_amount = Column(Float, nullable=True)
    refund_status = Column(String(20), default=RefundStatus.NOT_INITIATED.value, nullable=False)
    refund_reason = Column(String(500), nullable=True)
    refund_initiated_at = Column(DateTime, nullable=True)
    refund_completed_at = Column(DateTime, nullable=True)

    failure_reason = Column(String(500), nullable=True)
    retry_count = Column(Integer, default=0, nullable=False)
    max_retries = Column(Integer, default=3, nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    deleted_at = Column(DateTime, nullable=True)

    booking = relationship("Booking", back_populates="payments")
    user = relationship("User")
