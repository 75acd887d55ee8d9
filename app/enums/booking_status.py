from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CHECKED_IN = "Checked-In"
    CHECKED_OUT = "Checked-Out"
    CANCELLED = "Cancelled"
    # Reserved, no operation transitions into it
    NO_SHOW = "No-Show"


class BookingPaymentStatus(str, Enum):
    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"
    REFUNDED = "Refunded"


class CancelledBy(str, Enum):
    USER = "User"
    ADMIN = "Admin"


class CancellationRefundStatus(str, Enum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    FAILED = "Failed"
