"""
Keeps Booking.status / Booking.payment_status consistent with the payment
attached to the booking. Both rows change in the caller's session and are
committed together.
"""

import structlog

from database.models.booking_model import Booking
from database.models.payment_model import Payment
from enums.booking_status import (
    BookingStatus,
    BookingPaymentStatus,
    CancellationRefundStatus,
)
from utils.exceptions import InternalError

logger = structlog.get_logger(__name__)

_SETTLED = {
    BookingPaymentStatus.PAID,
    BookingPaymentStatus.PARTIAL,
    BookingPaymentStatus.REFUNDED,
}

# Payment states a booking may show in each of its own states
ALLOWED_PAYMENT_STATES = {
    BookingStatus.PENDING: {BookingPaymentStatus.UNPAID},
    BookingStatus.CONFIRMED: _SETTLED,
    BookingStatus.CHECKED_IN: _SETTLED,
    BookingStatus.CHECKED_OUT: _SETTLED,
    BookingStatus.CANCELLED: set(BookingPaymentStatus),
    BookingStatus.NO_SHOW: set(BookingPaymentStatus),
}


def ensure_consistent(booking: Booking) -> None:
    status = BookingStatus(booking.status)
    payment_status = BookingPaymentStatus(booking.payment_status)
    if payment_status not in ALLOWED_PAYMENT_STATES[status]:
        logger.error(
            "booking_payment_state_mismatch",
            booking_id=booking.booking_id,
            status=status.value,
            payment_status=payment_status.value,
        )
        raise InternalError(
            f"Booking {booking.booking_id} cannot be {status.value} with payment {payment_status.value}"
        )


def apply_payment_success(booking: Booking, payment: Payment) -> None:
    booking.payment_status = BookingPaymentStatus.PAID.value
    booking.status = BookingStatus.CONFIRMED.value
    booking.payment_id = payment.id
    ensure_consistent(booking)


def apply_payment_failure(booking: Booking) -> None:
    # The booking stays Pending so the guest can retry
    booking.payment_status = BookingPaymentStatus.UNPAID.value
    ensure_consistent(booking)


def apply_refund(booking: Booking, full_refund: bool) -> None:
    booking.payment_status = (
        BookingPaymentStatus.REFUNDED.value
        if full_refund
        else BookingPaymentStatus.PARTIAL.value
    )
    if booking.status == BookingStatus.CANCELLED.value:
        booking.cancellation_refund_status = CancellationRefundStatus.PROCESSED.value
    ensure_consistent(booking)
