from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from schemas.payment_schema import PaymentCallback, PaymentCreate, ProcessRefund, RefundRequest
from services.payment_service import PaymentService
from utils.dependencies import admin_required, get_current_user
from responses.success import created_response, data_response, paginated_response, success_response

router = APIRouter(prefix="/payments", tags=["Payments"])
payment_service = PaymentService()


@router.post("")
async def initiate_payment(
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = payment_service.initiate_payment(db, payment_in, current_user)
    return created_response(
        "Payment initiated", payment_service.format_initiated_response(payment)
    )


@router.post("/webhook/callback")
async def payment_callback(callback: PaymentCallback, db: Session = Depends(get_db)):
    """Gateway webhook. Unauthenticated; redelivery of a recorded outcome is a no-op."""
    payment = payment_service.handle_callback(db, callback)
    return data_response(payment_service.format_payment_response(payment))


@router.get("/me")
async def my_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payments, total = payment_service.get_user_payments(db, current_user, page, limit)
    return paginated_response(
        [payment_service.format_payment_response(p) for p in payments], total, page, limit
    )


@router.get("/stats")
async def payment_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    return data_response(payment_service.get_stats(db))


@router.get("/verify/{transaction_id}")
async def verify_payment(
    transaction_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = payment_service.verify_payment(db, transaction_id, current_user)
    return data_response(payment_service.format_payment_response(payment))


@router.get("/{payment_id}")
async def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = payment_service.get_payment(db, payment_id, current_user)
    return data_response(payment_service.format_payment_response(payment))


@router.get("/{payment_id}/invoice")
async def get_invoice(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return data_response(payment_service.get_invoice(db, payment_id, current_user))


@router.post("/{payment_id}/refund-request")
async def request_refund(
    payment_id: int,
    refund_in: RefundRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = payment_service.get_or_404(db, payment_id)
    payment = payment_service.request_refund(db, payment, refund_in, current_user)
    return success_response(
        "Refund request submitted", payment_service.format_payment_response(payment)
    )


@router.post("/{payment_id}/refund")
async def process_refund(
    payment_id: int,
    refund_in: ProcessRefund,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    payment = payment_service.process_refund(db, payment_service.get_or_404(db, payment_id), refund_in)
    return success_response("Refund processed", payment_service.format_payment_response(payment))


@router.post("/{payment_id}/retry")
async def retry_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = payment_service.get_or_404(db, payment_id)
    payment = payment_service.retry_payment(db, payment, current_user)
    return success_response("Payment retry initiated", payment_service.format_payment_response(payment))
