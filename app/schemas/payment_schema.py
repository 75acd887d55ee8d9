from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, Optional

from enums.payment_method import PaymentMethodType
from enums.payment_status import GatewayOutcome


class CardDetails(BaseModel):
    last4: str = Field(min_length=4, max_length=4, pattern=r"^\d{4}$")
    brand: Optional[str] = None


class PaymentCreate(BaseModel):
    booking_id: int
    payment_method: PaymentMethodType
    card_details: Optional[CardDetails] = None
    upi_id: Optional[str] = None
    bank_name: Optional[str] = None
    wallet_name: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class PaymentCallback(BaseModel):
    transaction_id: str
    status: GatewayOutcome
    gateway_transaction_id: Optional[str] = None
    gateway_reference_id: Optional[str] = None
    response: Optional[Dict[str, Any]] = None


class RefundRequest(BaseModel):
    reason: str = Field(min_length=3, max_length=500)
    amount: Optional[float] = Field(default=None, gt=0)

    model_config = ConfigDict(extra="forbid")


class ProcessRefund(BaseModel):
    amount: Optional[float] = Field(default=None, gt=0)
    reason: Optional[str] = Field(default=None, max_length=500)

    model_config = ConfigDict(extra="forbid")
