from typing import List

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from database.models.hotel_model import Hotel
from database.models.room_model import RoomType
from schemas.room_schema import RoomCreate, RoomUpdate, RoomDiscount, RoomResponse
from services.base_service import BaseService
from services.inventory_service import InventoryService
from services.pricing_service import effective_nightly_rate
from utils.dates import to_naive_utc

logger = structlog.get_logger(__name__)


class RoomService(BaseService):
    not_found_message = "Room not found"

    def __init__(self):
        super().__init__(RoomType)
        self.inventory = InventoryService()

    def create_room(self, db: Session, hotel: Hotel, room_in: RoomCreate) -> RoomType:
        room = self.create(
            db,
            room_in,
            hotel_id=hotel.id,
            available_rooms=room_in.total_rooms,
        )
        logger.info("room_created", room_id=room.id, hotel_id=hotel.id, total_rooms=room.total_rooms)
        return room

    def get_hotel_rooms(self, db: Session, hotel_id: int, only_available: bool = False) -> List[RoomType]:
        query = self.query(db).filter(
            self.model.hotel_id == hotel_id, self.model.is_active.is_(True)
        )
        if only_available:
            query = query.filter(self.model.available_rooms > 0)
        return query.order_by(self.model.room_type).all()

    def update_room(self, db: Session, room: RoomType, room_in: RoomUpdate) -> RoomType:
        changes = room_in.model_dump(exclude_unset=True, mode="json")
        new_total = changes.pop("total_rooms", None)

        try:
            if new_total is not None:
                self.inventory.resize(db, room.id, new_total)
            for key, value in changes.items():
                setattr(room, key, value)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(room)
        logger.info("room_updated", room_id=room.id, fields=sorted(room_in.model_fields_set))
        return room

    def apply_discount(self, db: Session, room: RoomType, discount_in: RoomDiscount) -> RoomType:
        room.discount_percentage = discount_in.percentage
        room.discount_valid_from = to_naive_utc(discount_in.valid_from)
        room.discount_valid_to = to_naive_utc(discount_in.valid_to)
        db.commit()
        db.refresh(room)
        logger.info("room_discount_applied", room_id=room.id, percentage=room.discount_percentage)
        return room

    def get_room_stats(self, db: Session, hotel_id: int) -> List[dict]:
        rows = (
            db.query(
                self.model.room_type,
                func.sum(self.model.total_rooms),
                func.sum(self.model.available_rooms),
                func.avg(self.model.base_price),
                func.count(self.model.id),
            )
            .filter(self.model.hotel_id == hotel_id, self.model.deleted_at.is_(None))
            .group_by(self.model.room_type)
            .all()
        )
        return [
            {
                "room_type": room_type,
                "total_rooms": int(total or 0),
                "available_rooms": int(available or 0),
                "booked_rooms": int((total or 0) - (available or 0)),
                "average_price": round(float(average or 0), 2),
                "room_count": count,
            }
            for room_type, total, available, average, count in rows
        ]

    def format_room_response(self, room: RoomType) -> RoomResponse:
        response = RoomResponse.model_validate(room)
        response.effective_price = effective_nightly_rate(room)
        return response
