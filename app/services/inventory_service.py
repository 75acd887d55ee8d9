from typing import Iterable, List, Tuple

import structlog
from sqlalchemy import update
from sqlalchemy.orm import Session

from database.models.room_model import RoomType
from utils.exceptions import (
    InsufficientInventoryError,
    InventoryInvariantError,
    ValidationError,
)

logger = structlog.get_logger(__name__)


class InventoryService:
    """
    Owns RoomType.available_rooms.

    Every change is a single conditional UPDATE evaluated by the database, so
    two concurrent reservations can never both take the last room. Nothing
    here commits; callers commit together with the booking they belong to.
    """

    def _expire(self, db: Session, room_type_id: int, *fields: str) -> None:
        # Loaded instances must not keep a stale count after a bulk UPDATE
        room = db.identity_map.get(db.identity_key(RoomType, room_type_id))
        if room is not None:
            db.expire(room, list(fields) or ["available_rooms"])

    def reserve(self, db: Session, room_type_id: int, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError("Room quantity must be at least 1")

        result = db.execute(
            update(RoomType)
            .where(
                RoomType.id == room_type_id,
                RoomType.available_rooms >= quantity,
                RoomType.is_active.is_(True),
                RoomType.deleted_at.is_(None),
            )
            .values(available_rooms=RoomType.available_rooms - quantity)
            .execution_options(synchronize_session=False)
        )
        self._expire(db, room_type_id)
        if result.rowcount != 1:
            room = db.get(RoomType, room_type_id, populate_existing=True)
            remaining = room.available_rooms if room else 0
            label = room.room_type if room else room_type_id
            logger.info(
                "inventory_reserve_rejected",
                room_type_id=room_type_id,
                requested=quantity,
                remaining=remaining,
            )
            raise InsufficientInventoryError(
                f"Only {remaining} rooms available for {label}"
            )

        logger.debug("inventory_reserved", room_type_id=room_type_id, quantity=quantity)

    def release(self, db: Session, room_type_id: int, quantity: int) -> None:
        if quantity < 1:
            raise ValidationError("Room quantity must be at least 1")

        result = db.execute(
            update(RoomType)
            .where(
                RoomType.id == room_type_id,
                RoomType.available_rooms + quantity <= RoomType.total_rooms,
            )
            .values(available_rooms=RoomType.available_rooms + quantity)
            .execution_options(synchronize_session=False)
        )
        self._expire(db, room_type_id)
        if result.rowcount != 1:
            logger.critical(
                "inventory_release_overflow",
                room_type_id=room_type_id,
                quantity=quantity,
            )
            raise InventoryInvariantError()

        logger.debug("inventory_released", room_type_id=room_type_id, quantity=quantity)

    def resize(self, db: Session, room_type_id: int, new_total: int) -> None:
        """
        Set total_rooms and move available_rooms by the same difference.

        Rooms already sold stay sold: the database computes the new available
        count from the current row, so a reservation committed concurrently
        is never overwritten. Fails when the new total is below the number of
        rooms currently booked.
        """
        if new_total < 0:
            raise ValidationError("Total rooms cannot be negative")

        delta = new_total - RoomType.total_rooms
        result = db.execute(
            update(RoomType)
            .where(
                RoomType.id == room_type_id,
                RoomType.available_rooms + delta >= 0,
            )
            # MySQL applies SET left to right, so available must read the old total
            .ordered_values(
                (RoomType.available_rooms, RoomType.available_rooms + delta),
                (RoomType.total_rooms, new_total),
            )
            .execution_options(synchronize_session=False)
        )
        self._expire(db, room_type_id, "total_rooms", "available_rooms")
        if result.rowcount != 1:
            room = db.get(RoomType, room_type_id, populate_existing=True)
            booked = room.total_rooms - room.available_rooms if room else 0
            logger.info(
                "inventory_resize_rejected",
                room_type_id=room_type_id,
                new_total=new_total,
                booked=booked,
            )
            raise ValidationError(
                f"Cannot reduce total rooms below the {booked} already booked"
            )

        logger.debug("inventory_resized", room_type_id=room_type_id, total_rooms=new_total)

    def reserve_all(self, db: Session, lines: Iterable[Tuple[int, int]]) -> None:
        """Reserve every (room_type_id, quantity) line or none of them."""
        reserved: List[Tuple[int, int]] = []
        try:
            for room_type_id, quantity in lines:
                self.reserve(db, room_type_id, quantity)
                reserved.append((room_type_id, quantity))
        except InsufficientInventoryError:
            # Compensate the lines already taken in this request
            for room_type_id, quantity in reversed(reserved):
                self.release(db, room_type_id, quantity)
            raise

    def release_all(self, db: Session, lines: Iterable[Tuple[int, int]]) -> None:
        for room_type_id, quantity in lines:
            self.release(db, room_type_id, quantity)
