from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Tuple

import structlog

from config import PAYMENT_CURRENCY, PAYMENT_GATEWAY, PAYMENT_MAX_RETRIES
from database.models.payment_model import Payment
from database.models.user_model import User
from enums.booking_status import BookingStatus, BookingPaymentStatus
from enums.payment_method import PaymentMethodType
from enums.payment_status import GatewayOutcome, PaymentStatus, RefundStatus
from enums.user_role import UserRole
from schemas.booking_response import (
    GatewayRequest,
    InvoiceResponse,
    PaymentInitiatedResponse,
    PaymentResponse,
    RefundResponse,
)
from schemas.payment_schema import PaymentCallback, PaymentCreate, ProcessRefund, RefundRequest
from services.base_service import BaseService
from services.booking_service import BookingService
from services.pricing_service import round_money
from services import booking_sync
from utils.dates import utcnow
from utils.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    StateError,
    ValidationError,
)
from utils.id_generator import (
    generate_invoice_number,
    generate_refund_id,
    generate_transaction_id,
)

logger = structlog.get_logger(__name__)

PAYMENT_TRANSITIONS = {
    PaymentStatus.INITIATED: {
        PaymentStatus.PROCESSING,
        PaymentStatus.SUCCESS,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELLED,
    },
    PaymentStatus.PROCESSING: {
        PaymentStatus.SUCCESS,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELLED,
    },
    PaymentStatus.FAILED: {PaymentStatus.PROCESSING, PaymentStatus.CANCELLED},
    PaymentStatus.SUCCESS: {PaymentStatus.REFUNDED, PaymentStatus.PARTIAL},
    PaymentStatus.CANCELLED: set(),
    PaymentStatus.REFUNDED: set(),
    PaymentStatus.PARTIAL: set(),
}

# A booking may hold only one payment in these states at a time
ACTIVE_PAYMENT_STATUSES = {
    PaymentStatus.INITIATED.value,
    PaymentStatus.PROCESSING.value,
    PaymentStatus.SUCCESS.value,
    PaymentStatus.FAILED.value,
}

_OUTCOME_STATUS = {
    GatewayOutcome.SUCCESS: PaymentStatus.SUCCESS,
    GatewayOutcome.FAILED: PaymentStatus.FAILED,
}


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in PAYMENT_TRANSITIONS[current]


class PaymentService(BaseService):
    not_found_message = "Payment not found"

    def __init__(self):
        super().__init__(Payment)
        self.booking_service = BookingService()

    def ensure_payer_or_admin(self, payment: Payment, user: User) -> None:
        if user.role != UserRole.ADMIN.value and payment.user_id != user.id:
            raise AuthorizationError("Not authorized to access this payment")

    def retries_exhausted(self, payment: Payment) -> bool:
        return (
            payment.status == PaymentStatus.FAILED.value
            and payment.retry_count >= payment.max_retries
        )

    def get_payment(self, db: Session, id: int, user: User) -> Payment:
        payment = self.get_or_404(db, id)
        self.ensure_payer_or_admin(payment, user)
        return payment

    def get_by_transaction(self, db: Session, transaction_id: str) -> Payment:
        payment = self.query(db).filter(Payment.transaction_id == transaction_id).first()
        if payment is None:
            raise NotFoundError(self.not_found_message)
        return payment

    def verify_payment(self, db: Session, transaction_id: str, user: User) -> Payment:
        payment = self.get_by_transaction(db, transaction_id)
        self.ensure_payer_or_admin(payment, user)
        return payment

    def get_user_payments(
        self, db: Session, user: User, page: int = 1, limit: int = 20
    ) -> Tuple[List[Payment], int]:
        query = self.query(db).filter(Payment.user_id == user.id)
        return self.paginate(query.order_by(Payment.id.desc()), page, limit)

    def initiate_payment(self, db: Session, payment_in: PaymentCreate, user: User) -> Payment:
        booking = self.booking_service.get_or_404(db, payment_in.booking_id)
        if booking.user_id != user.id:
            raise AuthorizationError("Not authorized to pay for this booking")
        if booking.payment_status == BookingPaymentStatus.PAID.value:
            raise ConflictError("Booking is already paid")
        if booking.status != BookingStatus.PENDING.value:
            raise StateError(f"Cannot pay for a {booking.status} booking")

        active = self.query(db).filter(
            Payment.booking_id == booking.id,
            Payment.status.in_(ACTIVE_PAYMENT_STATUSES),
        )
        for existing in active:
            # A failed payment that can no longer be retried does not block a new one
            if not self.retries_exhausted(existing):
                raise ConflictError(
                    f"Booking already has a payment in progress ({existing.transaction_id})"
                )

        card = payment_in.card_details
        payment = Payment(
            transaction_id=generate_transaction_id(),
            booking_id=booking.id,
            user_id=user.id,
            amount=booking.total_price,
            currency=PAYMENT_CURRENCY,
            payment_method=payment_in.payment_method.value,
            card_last4=card.last4 if card else None,
            card_brand=card.brand if card else None,
            upi_id=payment_in.upi_id,
            bank_name=payment_in.bank_name,
            wallet_name=payment_in.wallet_name,
            status=PaymentStatus.INITIATED.value,
            gateway=PAYMENT_GATEWAY,
            max_retries=PAYMENT_MAX_RETRIES,
        )
        db.add(payment)
        db.commit()
        db.refresh(payment)
        logger.info(
            "payment_initiated",
            transaction_id=payment.transaction_id,
            booking_id=booking.booking_id,
            amount=payment.amount,
        )
        return payment

    def build_gateway_request(self, payment: Payment) -> GatewayRequest:
        return GatewayRequest(
            amount=payment.amount,
            currency=payment.currency,
            description=f"Booking payment {payment.booking.booking_id}",
            receipt=payment.transaction_id,
        )

    def handle_callback(self, db: Session, callback: PaymentCallback) -> Payment:
        """
        Apply a gateway outcome to the payment and its booking.

        Redelivery of an outcome that is already recorded changes nothing.
        """
        payment = self.get_by_transaction(db, callback.transaction_id)
        current = PaymentStatus(payment.status)
        target = _OUTCOME_STATUS[callback.status]

        if current == target:
            logger.info(
                "payment_callback_duplicate",
                transaction_id=payment.transaction_id,
                status=current.value,
            )
            return payment

        if not can_transition(current, target):
            raise StateError(
                f"Cannot mark a {current.value} payment as {target.value}"
            )

        booking = payment.booking
        response = callback.response or {}
        try:
            payment.status = target.value
            payment.gateway_transaction_id = callback.gateway_transaction_id
            payment.gateway_reference_id = callback.gateway_reference_id
            payment.gateway_response = response

            if target == PaymentStatus.SUCCESS:
                payment.failure_reason = None
                booking_sync.apply_payment_success(booking, payment)
            else:
                payment.failure_reason = response.get("error") or "Payment failed"
                booking_sync.apply_payment_failure(booking)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(payment)
        logger.info(
            "payment_callback_applied",
            transaction_id=payment.transaction_id,
            status=payment.status,
            booking_id=booking.booking_id,
        )
        return payment

    def request_refund(
        self, db: Session, payment: Payment, refund_in: RefundRequest, user: User
    ) -> Payment:
        self.ensure_payer_or_admin(payment, user)
        if payment.status != PaymentStatus.SUCCESS.value:
            raise StateError("Only successful payments can be refunded")
        if payment.refund_status != RefundStatus.NOT_INITIATED.value:
            raise StateError("A refund has already been requested for this payment")

        amount = refund_in.amount if refund_in.amount is not None else payment.amount
        if amount > payment.amount:
            raise ValidationError("Refund amount cannot exceed the payment amount")

        payment.refund_id = generate_refund_id()
        payment.refund_amount = round_money(amount)
        payment.refund_status = RefundStatus.PENDING.value
        payment.refund_reason = refund_in.reason
        payment.refund_initiated_at = utcnow()
        db.commit()
        db.refresh(payment)
        logger.info(
            "refund_requested",
            transaction_id=payment.transaction_id,
            refund_id=payment.refund_id,
            amount=payment.refund_amount,
        )
        return payment

    def process_refund(self, db: Session, payment: Payment, refund_in: ProcessRefund) -> Payment:
        if payment.status != PaymentStatus.SUCCESS.value:
            raise StateError("Only successful payments can be refunded")
        if payment.refund_status == RefundStatus.PROCESSED.value:
            raise StateError("Refund already processed")

        if refund_in.amount is not None:
            amount = refund_in.amount
        elif payment.refund_amount:
            amount = payment.refund_amount
        else:
            amount = payment.amount
        if amount > payment.amount:
            raise ValidationError("Refund amount cannot exceed the payment amount")

        full_refund = round_money(amount) == round_money(payment.amount)
        now = utcnow()
        try:
            payment.refund_id = payment.refund_id or generate_refund_id()
            payment.refund_amount = round_money(amount)
            payment.refund_status = RefundStatus.PROCESSED.value
            if refund_in.reason:
                payment.refund_reason = refund_in.reason
            payment.refund_initiated_at = payment.refund_initiated_at or now
            payment.refund_completed_at = now
            payment.status = (
                PaymentStatus.REFUNDED.value if full_refund else PaymentStatus.PARTIAL.value
            )
            booking_sync.apply_refund(payment.booking, full_refund)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(payment)
        logger.info(
            "refund_processed",
            transaction_id=payment.transaction_id,
            refund_id=payment.refund_id,
            amount=payment.refund_amount,
            status=payment.status,
        )
        return payment

    def retry_payment(self, db: Session, payment: Payment, user: User) -> Payment:
        self.ensure_payer_or_admin(payment, user)
        if payment.status != PaymentStatus.FAILED.value:
            raise StateError("Only failed payments can be retried")
        if payment.retry_count >= payment.max_retries:
            raise StateError(f"Maximum retry attempts ({payment.max_retries}) exceeded")

        payment.retry_count += 1
        payment.failure_reason = None
        payment.status = PaymentStatus.PROCESSING.value
        db.commit()
        db.refresh(payment)
        logger.info(
            "payment_retried",
            transaction_id=payment.transaction_id,
            retry_count=payment.retry_count,
        )
        return payment

    def get_stats(self, db: Session) -> dict:
        success = (
            self.query(db)
            .with_entities(func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
            .filter(Payment.status == PaymentStatus.SUCCESS.value)
            .one()
        )
        by_method = (
            self.query(db)
            .with_entities(
                Payment.payment_method,
                func.count(Payment.id),
                func.coalesce(func.sum(Payment.amount), 0),
            )
            .filter(Payment.status == PaymentStatus.SUCCESS.value)
            .group_by(Payment.payment_method)
            .all()
        )
        by_status = dict(
            self.query(db)
            .with_entities(Payment.status, func.count(Payment.id))
            .group_by(Payment.status)
            .all()
        )
        return {
            "total_transactions": success[0],
            "total_amount": round_money(float(success[1])),
            "by_method": [
                {"payment_method": method, "count": count, "total_amount": round_money(float(total))}
                for method, count, total in by_method
            ],
            "by_status": {status.value: by_status.get(status.value, 0) for status in PaymentStatus},
        }

    def get_invoice(self, db: Session, id: int, user: User) -> InvoiceResponse:
        payment = self.get_payment(db, id, user)
        if payment.status not in (
            PaymentStatus.SUCCESS.value,
            PaymentStatus.REFUNDED.value,
            PaymentStatus.PARTIAL.value,
        ):
            raise StateError("Invoice is available only for completed payments")
        return InvoiceResponse(
            invoice_number=generate_invoice_number(payment.transaction_id),
            date=payment.updated_at or payment.created_at,
            payment=self.format_payment_response(payment),
            booking=self.booking_service.format_booking_response(payment.booking),
        )

    def format_payment_response(self, payment: Payment) -> PaymentResponse:
        return PaymentResponse(
            id=payment.id,
            transaction_id=payment.transaction_id,
            booking_id=payment.booking_id,
            user_id=payment.user_id,
            amount=payment.amount,
            currency=payment.currency,
            payment_method=PaymentMethodType(payment.payment_method),
            card_last4=payment.card_last4,
            card_brand=payment.card_brand,
            upi_id=payment.upi_id,
            bank_name=payment.bank_name,
            wallet_name=payment.wallet_name,
            status=payment.status,
            gateway=payment.gateway,
            gateway_transaction_id=payment.gateway_transaction_id,
            gateway_response=payment.gateway_response,
            refund=RefundResponse(
                refund_id=payment.refund_id,
                refund_amount=payment.refund_amount,
                refund_status=payment.refund_status,
                refund_reason=payment.refund_reason,
                refund_initiated_at=payment.refund_initiated_at,
                refund_completed_at=payment.refund_completed_at,
            ),
            failure_reason=payment.failure_reason,
            retry_count=payment.retry_count,
            max_retries=payment.max_retries,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
        )

    def format_initiated_response(self, payment: Payment) -> PaymentInitiatedResponse:
        return PaymentInitiatedResponse(
            payment=self.format_payment_response(payment),
            gateway_request=self.build_gateway_request(payment),
        )
