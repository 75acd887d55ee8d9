from enum import Enum

class PaymentStatus(str, Enum):
    INITIATED = "Initiated"
    PROCESSING = "Processing"
    SUCCESS = "Success"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"
    PARTIAL = "Partial"


class RefundStatus(str, Enum):
    NOT_INITIATED = "Not Initiated"
    PENDING = "Pending"
    PROCESSED = "Processed"
    FAILED = "Failed"
    PARTIAL = "Partial"


class GatewayOutcome(str, Enum):
    SUCCESS = "Success"
    FAILED = "Failed"
