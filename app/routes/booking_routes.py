from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from database.init import get_db
from database.models.user_model import User
from enums.booking_status import BookingPaymentStatus, BookingStatus
from schemas.booking_schema import BookingCancel, BookingCreate, BookingUpdate
from schemas.booking_response import CancelBookingResponse
from services.booking_service import BookingService
from services.hotel_service import HotelService
from utils.dependencies import admin_required, get_current_user
from responses.success import created_response, data_response, paginated_response, success_response

router = APIRouter(prefix="/bookings", tags=["Bookings"])
booking_service = BookingService()
hotel_service = HotelService()


@router.post("")
async def create_booking(
    booking_in: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.create_booking(db, booking_in, current_user)
    return created_response(
        "Booking created successfully", booking_service.format_booking_response(booking)
    )


@router.get("")
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[BookingStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Own bookings for guests, all bookings for admins."""
    bookings, total = booking_service.get_bookings(db, current_user, page, limit, status)
    return paginated_response(
        [booking_service.format_booking_response(b) for b in bookings], total, page, limit
    )


@router.get("/stats")
async def booking_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    return data_response(booking_service.get_stats(db))


@router.get("/hotel/{hotel_id}")
async def hotel_bookings(
    hotel_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    hotel = hotel_service.get_or_404(db, hotel_id)
    bookings, total = booking_service.get_hotel_bookings(db, hotel, current_user, page, limit)
    return paginated_response(
        [booking_service.format_booking_response(b) for b in bookings], total, page, limit
    )


@router.get("/confirmation/{confirmation_number}")
async def get_by_confirmation(
    confirmation_number: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.get_by_confirmation(db, confirmation_number, current_user)
    return data_response(booking_service.format_booking_response(booking))


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.get_booking(db, booking_id, current_user)
    return data_response(booking_service.format_booking_response(booking))


@router.patch("/{booking_id}")
async def update_booking(
    booking_id: int,
    booking_in: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.get_or_404(db, booking_id)
    booking = booking_service.update_booking(db, booking, booking_in, current_user)
    return success_response(
        "Booking updated successfully", booking_service.format_booking_response(booking)
    )


@router.post("/{booking_id}/cancel")
async def cancel_booking(
    booking_id: int,
    payload: Optional[BookingCancel] = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.get_or_404(db, booking_id)
    reason = payload.reason if payload else None
    booking, refund_amount = booking_service.cancel_booking(db, booking, current_user, reason)
    if refund_amount > 0:
        message = "Booking cancelled. Full refund will be processed"
    elif booking.payment_status in (
        BookingPaymentStatus.REFUNDED.value,
        BookingPaymentStatus.PARTIAL.value,
    ):
        message = "Booking cancelled. Refund already processed"
    else:
        message = "Booking cancelled. Non-refundable booking"
    return success_response(
        message,
        CancelBookingResponse(
            booking=booking_service.format_booking_response(booking),
            refund_amount=refund_amount,
            message=message,
        ),
    )


@router.post("/{booking_id}/check-in")
async def check_in(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.check_in(db, booking_service.get_or_404(db, booking_id), current_user)
    return success_response("Guest checked in", booking_service.format_booking_response(booking))


@router.post("/{booking_id}/check-out")
async def check_out(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.check_out(db, booking_service.get_or_404(db, booking_id), current_user)
    return success_response("Guest checked out", booking_service.format_booking_response(booking))


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    booking_service.soft_delete(db, booking_service.get_or_404(db, booking_id))
    return success_response("Booking deleted successfully")
