from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from enums.booking_status import (
    BookingStatus,
    BookingPaymentStatus,
    CancelledBy,
    CancellationRefundStatus,
)
from enums.payment_method import PaymentMethodType
from enums.payment_status import PaymentStatus, RefundStatus
from .auth_schema import UserMinimumResponse


class BookingRoomResponse(BaseModel):
    room_type_id: int
    room_type: Optional[str] = None
    quantity: int
    base_price: float
    final_price: float

    model_config = ConfigDict(from_attributes=True)


class GuestDetailsResponse(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    number_of_guests: int


class PricingResponse(BaseModel):
    room_charges: float
    taxes_and_fees: float
    discount: float
    total_price: float
    per_night_price: Optional[float] = None
    number_of_nights: int


class CancellationResponse(BaseModel):
    reason: Optional[str] = None
    cancelled_at: datetime
    cancelled_by: CancelledBy
    refund_amount: float
    refund_status: CancellationRefundStatus


class CancellationPolicyResponse(BaseModel):
    free_cancel_days: int
    description: Optional[str] = None


class ModificationResponse(BaseModel):
    modified_at: datetime
    modified_by: int
    changes: str

    model_config = ConfigDict(from_attributes=True)


class BookingResponse(BaseModel):
    id: int
    booking_id: str
    confirmation_number: str
    user: Optional[UserMinimumResponse] = None
    hotel_id: int
    hotel_name: Optional[str] = None
    rooms: List[BookingRoomResponse] = []
    guest_details: GuestDetailsResponse
    special_requests: Optional[str] = None
    check_in_date: datetime
    check_out_date: datetime
    number_of_nights: int
    pricing: PricingResponse
    status: BookingStatus
    payment_status: BookingPaymentStatus
    payment_id: Optional[int] = None
    cancellation: Optional[CancellationResponse] = None
    cancellation_policy: CancellationPolicyResponse
    is_modified: bool
    modifications: List[ModificationResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


class CancelBookingResponse(BaseModel):
    booking: BookingResponse
    refund_amount: float
    message: str


class RefundResponse(BaseModel):
    refund_id: Optional[str] = None
    refund_amount: Optional[float] = None
    refund_status: RefundStatus
    refund_reason: Optional[str] = None
    refund_initiated_at: Optional[datetime] = None
    refund_completed_at: Optional[datetime] = None


class PaymentResponse(BaseModel):
    id: int
    transaction_id: str
    booking_id: int
    user_id: int
    amount: float
    currency: str
    payment_method: PaymentMethodType
    card_last4: Optional[str] = None
    card_brand: Optional[str] = None
    upi_id: Optional[str] = None
    bank_name: Optional[str] = None
    wallet_name: Optional[str] = None
    status: PaymentStatus
    gateway: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    gateway_response: Optional[Dict[str, Any]] = None
    refund: RefundResponse
    failure_reason: Optional[str] = None
    retry_count: int
    max_retries: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class GatewayRequest(BaseModel):
    amount: float
    currency: str
    description: str
    receipt: str


class PaymentInitiatedResponse(BaseModel):
    payment: PaymentResponse
    gateway_request: GatewayRequest


class InvoiceResponse(BaseModel):
    invoice_number: str
    date: datetime
    payment: PaymentResponse
    booking: BookingResponse
