from typing import List, Optional, Tuple

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from database.models.hotel_model import Hotel
from database.models.user_model import User
from enums.hotel_status import HotelStatus
from enums.user_role import UserRole
from schemas.hotel_schema import HotelCreate, HotelUpdate
from services.base_service import BaseService
from utils.exceptions import AuthorizationError, StateError, ValidationError

logger = structlog.get_logger(__name__)


class HotelService(BaseService):
    not_found_message = "Hotel not found"

    def __init__(self):
        super().__init__(Hotel)

    def create_hotel(self, db: Session, owner: User, hotel_in: HotelCreate) -> Hotel:
        hotel = self.create(db, hotel_in, owner_id=owner.id, status=HotelStatus.PENDING.value)
        logger.info("hotel_created", hotel_id=hotel.id, owner_id=owner.id)
        return hotel

    def get_hotels(
        self,
        db: Session,
        page: int = 1,
        limit: int = 20,
        city: Optional[str] = None,
        status: Optional[HotelStatus] = None,
        owner_id: Optional[int] = None,
    ) -> Tuple[List[Hotel], int]:
        query = self.query(db)
        if city:
            query = query.filter(func.lower(self.model.city).like(f"%{city.lower()}%"))
        if status is not None:
            query = query.filter(self.model.status == status.value)
        if owner_id is not None:
            query = query.filter(self.model.owner_id == owner_id)
        return self.paginate(query.order_by(self.model.id.desc()), page, limit)

    def is_manager(self, hotel: Hotel, user: User) -> bool:
        return user.role == UserRole.ADMIN.value or hotel.owner_id == user.id

    def ensure_manager(self, hotel: Hotel, user: User) -> None:
        if not self.is_manager(hotel, user):
            raise AuthorizationError("Not authorized to manage this hotel")

    def approve(self, db: Session, hotel: Hotel) -> Hotel:
        if hotel.status == HotelStatus.APPROVED.value:
            raise StateError("Hotel is already approved")
        hotel.status = HotelStatus.APPROVED.value
        hotel.rejection_reason = None
        db.commit()
        db.refresh(hotel)
        logger.info("hotel_approved", hotel_id=hotel.id)
        return hotel

    def reject(self, db: Session, hotel: Hotel, reason: str) -> Hotel:
        if hotel.status == HotelStatus.REJECTED.value:
            raise StateError("Hotel is already rejected")
        hotel.status = HotelStatus.REJECTED.value
        hotel.rejection_reason = reason
        db.commit()
        db.refresh(hotel)
        logger.info("hotel_rejected", hotel_id=hotel.id)
        return hotel

    def update_hotel(self, db: Session, hotel: Hotel, hotel_in: HotelUpdate, user: User) -> Hotel:
        self.ensure_manager(hotel, user)
        changes = hotel_in.model_dump(exclude_unset=True, mode="json")
        if not changes:
            raise ValidationError("No changes provided")
        for field in ("name", "city", "address", "free_cancel_days"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be cleared")

        hotel = self.update(db, hotel, hotel_in)
        logger.info("hotel_updated", hotel_id=hotel.id, fields=sorted(changes))
        return hotel
