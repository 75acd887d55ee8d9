from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

import structlog

from database.models.booking_model import Booking, BookingRoom, BookingModification
from database.models.hotel_model import Hotel
from database.models.room_model import RoomType
from database.models.user_model import User
from enums.booking_status import (
    BookingStatus,
    BookingPaymentStatus,
    CancelledBy,
    CancellationRefundStatus,
)
from enums.payment_status import PaymentStatus, RefundStatus
from enums.user_role import UserRole
from schemas.auth_schema import UserMinimumResponse
from schemas.booking_response import (
    BookingResponse,
    BookingRoomResponse,
    CancellationPolicyResponse,
    CancellationResponse,
    GuestDetailsResponse,
    ModificationResponse,
    PricingResponse,
)
from schemas.booking_schema import BookingCreate, BookingUpdate
from services.base_service import BaseService
from services.inventory_service import InventoryService
from services.pricing_service import price_stay
from services import booking_sync
from utils.dates import ceil_days, utcnow
from utils.exceptions import (
    AuthorizationError,
    NotFoundError,
    StateError,
    ValidationError,
)
from utils.id_generator import (
    generate_booking_id,
    generate_confirmation_number,
    generate_refund_id,
)

logger = structlog.get_logger(__name__)

# Every status is listed, terminal ones map to an empty set
BOOKING_TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {
        BookingStatus.CHECKED_IN,
        BookingStatus.CANCELLED,
        BookingStatus.NO_SHOW,
    },
    BookingStatus.CHECKED_IN: {BookingStatus.CHECKED_OUT},
    BookingStatus.CHECKED_OUT: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.NO_SHOW: set(),
}

EDITABLE_STATUSES = {BookingStatus.PENDING, BookingStatus.CONFIRMED}

OPEN_PAYMENT_STATUSES = {
    PaymentStatus.INITIATED.value,
    PaymentStatus.PROCESSING.value,
    PaymentStatus.FAILED.value,
}

SETTLED_REFUND_STATUSES = {
    PaymentStatus.REFUNDED.value,
    PaymentStatus.PARTIAL.value,
}

DEFAULT_CANCELLATION_REASON = "User requested cancellation"

_GUEST_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "address",
    "city",
    "state",
    "zip_code",
    "country",
    "number_of_guests",
)


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in BOOKING_TRANSITIONS[current]


def cancellation_refund(booking: Booking, now=None) -> Tuple[bool, float]:
    """
    Decide whether a cancellation made now falls inside the free-cancel window.

    Args:
        booking: the booking, carrying its policy snapshot
        now: reference time, defaults to the current UTC time

    Returns:
        (can_cancel, refund_amount): full total_price when the days left until
        check-in are at least the policy's free_cancel_days, 0 otherwise
    """
    now = now or utcnow()
    days_until_check_in = ceil_days(now, booking.check_in_date)
    can_cancel = days_until_check_in >= (booking.policy_free_cancel_days or 0)
    return can_cancel, (booking.total_price if can_cancel else 0.0)


class BookingService(BaseService):
    not_found_message = "Booking not found"

    def __init__(self):
        super().__init__(Booking)
        self.inventory = InventoryService()

    # Access rules

    def is_owner_or_admin(self, booking: Booking, user: User) -> bool:
        return user.role == UserRole.ADMIN.value or booking.user_id == user.id

    def is_hotel_manager(self, booking: Booking, user: User) -> bool:
        if user.role == UserRole.ADMIN.value:
            return True
        return booking.hotel is not None and booking.hotel.owner_id == user.id

    def ensure_can_view(self, booking: Booking, user: User) -> None:
        if not (self.is_owner_or_admin(booking, user) or self.is_hotel_manager(booking, user)):
            raise AuthorizationError("Not authorized to view this booking")

    def ensure_can_modify(self, booking: Booking, user: User) -> None:
        if not self.is_owner_or_admin(booking, user):
            raise AuthorizationError("Not authorized to modify this booking")

    def _transition(self, booking: Booking, target: BookingStatus, message: str) -> None:
        current = BookingStatus(booking.status)
        if not can_transition(current, target):
            raise StateError(message)
        booking.status = target.value

    # Reads

    def get_booking(self, db: Session, id: int, user: User) -> Booking:
        booking = self.get_or_404(db, id)
        self.ensure_can_view(booking, user)
        return booking

    def get_by_confirmation(self, db: Session, confirmation_number: str, user: User) -> Booking:
        booking = (
            self.query(db)
            .filter(Booking.confirmation_number == confirmation_number)
            .first()
        )
        if booking is None:
            raise NotFoundError(self.not_found_message)
        self.ensure_can_view(booking, user)
        return booking

    def get_bookings(
        self,
        db: Session,
        user: User,
        page: int = 1,
        limit: int = 20,
        status: Optional[BookingStatus] = None,
    ) -> Tuple[List[Booking], int]:
        """Own bookings, every booking for admins."""
        query = self.query(db)
        if user.role != UserRole.ADMIN.value:
            query = query.filter(Booking.user_id == user.id)
        if status is not None:
            query = query.filter(Booking.status == status.value)
        return self.paginate(query.order_by(Booking.id.desc()), page, limit)

    def get_hotel_bookings(
        self, db: Session, hotel: Hotel, user: User, page: int = 1, limit: int = 20
    ) -> Tuple[List[Booking], int]:
        if user.role != UserRole.ADMIN.value and hotel.owner_id != user.id:
            raise AuthorizationError("Not authorized to view bookings for this hotel")
        query = self.query(db).filter(Booking.hotel_id == hotel.id)
        return self.paginate(query.order_by(Booking.check_in_date), page, limit)

    # Mutations

    def create_booking(self, db: Session, booking_in: BookingCreate, user: User) -> Booking:
        if booking_in.check_in_date >= booking_in.check_out_date:
            raise ValidationError("Check-out date must be after check-in date")

        hotel = (
            db.query(Hotel)
            .filter(Hotel.id == booking_in.hotel_id, Hotel.deleted_at.is_(None))
            .first()
        )
        if hotel is None:
            raise NotFoundError("Hotel not found")

        selections = []
        for line in booking_in.rooms:
            room = (
                db.query(RoomType)
                .filter(
                    RoomType.id == line.room_id,
                    RoomType.hotel_id == hotel.id,
                    RoomType.deleted_at.is_(None),
                )
                .first()
            )
            if room is None:
                raise NotFoundError(f"Room {line.room_id} not found in this hotel")
            selections.append((room, line.quantity))

        try:
            self.inventory.reserve_all(db, [(room.id, qty) for room, qty in selections])

            quote = price_stay(selections, booking_in.check_in_date, booking_in.check_out_date)
            guest = booking_in.guest_details
            booking = Booking(
                booking_id=generate_booking_id(),
                confirmation_number=generate_confirmation_number(),
                user_id=user.id,
                hotel_id=hotel.id,
                guest_first_name=guest.first_name,
                guest_last_name=guest.last_name,
                guest_email=guest.email,
                guest_phone=guest.phone,
                guest_address=guest.address,
                guest_city=guest.city,
                guest_state=guest.state,
                guest_zip_code=guest.zip_code,
                guest_country=guest.country,
                number_of_guests=guest.number_of_guests,
                special_requests=booking_in.special_requests,
                check_in_date=booking_in.check_in_date,
                check_out_date=booking_in.check_out_date,
                number_of_nights=quote.number_of_nights,
                room_charges=quote.room_charges,
                taxes_and_fees=quote.taxes_and_fees,
                discount=quote.discount,
                total_price=quote.total_price,
                per_night_price=quote.per_night_price,
                status=BookingStatus.PENDING.value,
                payment_status=BookingPaymentStatus.UNPAID.value,
                policy_free_cancel_days=hotel.free_cancel_days or 0,
                policy_description=hotel.cancellation_policy,
            )
            booking.rooms = [
                BookingRoom(
                    room_type_id=line.room_type_id,
                    position=position,
                    room_type=line.room_type,
                    quantity=line.quantity,
                    base_price=line.base_price,
                    final_price=line.final_price,
                )
                for position, line in enumerate(quote.lines)
            ]
            db.add(booking)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(booking)
        logger.info(
            "booking_created",
            booking_id=booking.booking_id,
            user_id=user.id,
            hotel_id=hotel.id,
            total_price=booking.total_price,
        )
        return booking

    def update_booking(
        self, db: Session, booking: Booking, booking_in: BookingUpdate, user: User
    ) -> Booking:
        self.ensure_can_modify(booking, user)
        if BookingStatus(booking.status) not in EDITABLE_STATUSES:
            raise StateError(f"Cannot modify a {booking.status} booking")

        changed = []
        if booking_in.guest_details is not None:
            guest_changes = booking_in.guest_details.model_dump(exclude_unset=True)
            for key in _GUEST_FIELDS:
                if key not in guest_changes:
                    continue
                column = key if key == "number_of_guests" else f"guest_{key}"
                setattr(booking, column, guest_changes[key])
            if guest_changes:
                changed.append("Guest details updated")

        if "special_requests" in booking_in.model_fields_set:
            booking.special_requests = booking_in.special_requests
            changed.append("Special requests updated")

        if not changed:
            raise ValidationError("No changes provided")

        for entry in changed:
            booking.modifications.append(
                BookingModification(modified_by=user.id, changes=entry)
            )
        booking.is_modified = True
        db.commit()
        db.refresh(booking)
        logger.info("booking_modified", booking_id=booking.booking_id, changes=changed)
        return booking

    def cancel_booking(
        self, db: Session, booking: Booking, user: User, reason: Optional[str] = None
    ) -> Tuple[Booking, float]:
        self.ensure_can_modify(booking, user)
        if not can_transition(BookingStatus(booking.status), BookingStatus.CANCELLED):
            raise StateError(f"Cannot cancel a {booking.status} booking")

        now = utcnow()
        _, refund_amount = cancellation_refund(booking, now)
        payments = [p for p in booking.payments if p.deleted_at is None]
        for payment in payments:
            if payment.status in SETTLED_REFUND_STATUSES:
                # A processed refund is final, cancelling adds nothing on top of it
                refund_amount = 0.0
            elif (
                payment.status == PaymentStatus.SUCCESS.value
                and payment.refund_status == RefundStatus.PENDING.value
            ):
                refund_amount = min(refund_amount, payment.refund_amount or 0.0)

        try:
            booking.status = BookingStatus.CANCELLED.value
            booking.cancellation_reason = reason or DEFAULT_CANCELLATION_REASON
            booking.cancelled_at = now
            booking.cancelled_by = (
                CancelledBy.ADMIN.value
                if user.role == UserRole.ADMIN.value
                else CancelledBy.USER.value
            )
            booking.cancellation_refund_amount = refund_amount

            self.inventory.release_all(
                db, [(line.room_type_id, line.quantity) for line in booking.rooms]
            )

            refund_requested = False
            for payment in payments:
                if payment.status == PaymentStatus.SUCCESS.value:
                    if payment.refund_status == RefundStatus.PENDING.value:
                        # The guest's earlier request already covers this payment
                        refund_requested = True
                    elif refund_amount > 0 and payment.refund_status == RefundStatus.NOT_INITIATED.value:
                        payment.refund_id = generate_refund_id()
                        payment.refund_amount = min(refund_amount, payment.amount)
                        payment.refund_status = RefundStatus.PENDING.value
                        payment.refund_reason = booking.cancellation_reason
                        payment.refund_initiated_at = now
                        refund_requested = True
                elif payment.status in OPEN_PAYMENT_STATUSES:
                    payment.status = PaymentStatus.CANCELLED.value

            booking.cancellation_refund_status = (
                CancellationRefundStatus.PENDING.value
                if refund_requested
                else CancellationRefundStatus.PROCESSED.value
            )
            booking_sync.ensure_consistent(booking)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(booking)
        logger.info(
            "booking_cancelled",
            booking_id=booking.booking_id,
            cancelled_by=booking.cancelled_by,
            refund_amount=refund_amount,
        )
        return booking, refund_amount

    def check_in(self, db: Session, booking: Booking, user: User) -> Booking:
        if not self.is_hotel_manager(booking, user):
            raise AuthorizationError("Only the hotel owner or an admin can check guests in")
        if not can_transition(BookingStatus(booking.status), BookingStatus.CHECKED_IN):
            raise StateError(
                f"Only confirmed bookings can be checked in, booking is {booking.status}"
            )
        if utcnow() < booking.check_in_date:
            raise StateError("Check-in date has not been reached yet")
        booking.status = BookingStatus.CHECKED_IN.value
        db.commit()
        db.refresh(booking)
        logger.info("booking_checked_in", booking_id=booking.booking_id)
        return booking

    def check_out(self, db: Session, booking: Booking, user: User) -> Booking:
        if not self.is_hotel_manager(booking, user):
            raise AuthorizationError("Only the hotel owner or an admin can check guests out")
        self._transition(
            booking,
            BookingStatus.CHECKED_OUT,
            f"Only checked-in bookings can be checked out, booking is {booking.status}",
        )
        db.commit()
        db.refresh(booking)
        logger.info("booking_checked_out", booking_id=booking.booking_id)
        return booking

    def get_stats(self, db: Session) -> dict:
        by_status = dict(
            self.query(db)
            .with_entities(Booking.status, func.count(Booking.id))
            .group_by(Booking.status)
            .all()
        )
        revenue = (
            self.query(db)
            .with_entities(func.coalesce(func.sum(Booking.total_price), 0))
            .filter(Booking.status == BookingStatus.CHECKED_OUT.value)
            .scalar()
        )
        return {
            "total_bookings": sum(by_status.values()),
            "by_status": {status.value: by_status.get(status.value, 0) for status in BookingStatus},
            "total_revenue": round(float(revenue or 0), 2),
        }

    # Formatting

    def format_booking_response(self, booking: Booking) -> BookingResponse:
        cancellation = None
        if booking.status == BookingStatus.CANCELLED.value and booking.cancelled_at:
            cancellation = CancellationResponse(
                reason=booking.cancellation_reason,
                cancelled_at=booking.cancelled_at,
                cancelled_by=booking.cancelled_by,
                refund_amount=booking.cancellation_refund_amount or 0,
                refund_status=booking.cancellation_refund_status,
            )

        return BookingResponse(
            id=booking.id,
            booking_id=booking.booking_id,
            confirmation_number=booking.confirmation_number,
            user=UserMinimumResponse.model_validate(booking.user) if booking.user else None,
            hotel_id=booking.hotel_id,
            hotel_name=booking.hotel.name if booking.hotel else None,
            rooms=[BookingRoomResponse.model_validate(line) for line in booking.rooms],
            guest_details=GuestDetailsResponse(
                first_name=booking.guest_first_name,
                last_name=booking.guest_last_name,
                email=booking.guest_email,
                phone=booking.guest_phone,
                address=booking.guest_address,
                city=booking.guest_city,
                state=booking.guest_state,
                zip_code=booking.guest_zip_code,
                country=booking.guest_country,
                number_of_guests=booking.number_of_guests,
            ),
            special_requests=booking.special_requests,
            check_in_date=booking.check_in_date,
            check_out_date=booking.check_out_date,
            number_of_nights=booking.number_of_nights,
            pricing=PricingResponse(
                room_charges=booking.room_charges,
                taxes_and_fees=booking.taxes_and_fees,
                discount=booking.discount,
                total_price=booking.total_price,
                per_night_price=booking.per_night_price,
                number_of_nights=booking.number_of_nights,
            ),
            status=booking.status,
            payment_status=booking.payment_status,
            payment_id=booking.payment_id,
            cancellation=cancellation,
            cancellation_policy=CancellationPolicyResponse(
                free_cancel_days=booking.policy_free_cancel_days,
                description=booking.policy_description,
            ),
            is_modified=booking.is_modified,
            modifications=[
                ModificationResponse.model_validate(entry) for entry in booking.modifications
            ],
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
