from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from schemas.room_schema import RoomCreate, RoomDiscount, RoomStatsResponse, RoomUpdate
from services.hotel_service import HotelService
from services.room_service import RoomService
from utils.dependencies import get_current_user
from responses.success import created_response, data_response, success_response

# Room types live under their hotel for creation and listing, and at /rooms once they have an id
hotel_rooms_router = APIRouter(prefix="/hotels/{hotel_id}/rooms", tags=["Rooms"])
router = APIRouter(prefix="/rooms", tags=["Rooms"])

hotel_service = HotelService()
room_service = RoomService()


def _managed_room(db: Session, room_id: int, user: User):
    room = room_service.get_or_404(db, room_id)
    hotel_service.ensure_manager(room.hotel, user)
    return room


@hotel_rooms_router.post("")
async def create_room(
    hotel_id: int,
    room_in: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    hotel = hotel_service.get_or_404(db, hotel_id)
    hotel_service.ensure_manager(hotel, current_user)
    room = room_service.create_room(db, hotel, room_in)
    return created_response("Room created successfully", room_service.format_room_response(room))


@hotel_rooms_router.get("")
async def list_rooms(hotel_id: int, db: Session = Depends(get_db)):
    hotel_service.get_or_404(db, hotel_id)
    rooms = room_service.get_hotel_rooms(db, hotel_id)
    return data_response([room_service.format_room_response(r) for r in rooms])


@hotel_rooms_router.get("/available")
async def list_available_rooms(hotel_id: int, db: Session = Depends(get_db)):
    hotel_service.get_or_404(db, hotel_id)
    rooms = room_service.get_hotel_rooms(db, hotel_id, only_available=True)
    return data_response([room_service.format_room_response(r) for r in rooms])


@hotel_rooms_router.get("/stats")
async def room_stats(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    hotel = hotel_service.get_or_404(db, hotel_id)
    hotel_service.ensure_manager(hotel, current_user)
    stats = room_service.get_room_stats(db, hotel_id)
    return data_response([RoomStatsResponse(**row) for row in stats])


@router.get("/{room_id}")
async def get_room(room_id: int, db: Session = Depends(get_db)):
    room = room_service.get_or_404(db, room_id)
    return data_response(room_service.format_room_response(room))


@router.patch("/{room_id}")
async def update_room(
    room_id: int,
    room_in: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    room = room_service.update_room(db, _managed_room(db, room_id, current_user), room_in)
    return success_response("Room updated successfully", room_service.format_room_response(room))


@router.patch("/{room_id}/discount")
async def apply_discount(
    room_id: int,
    discount_in: RoomDiscount,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    room = room_service.apply_discount(db, _managed_room(db, room_id, current_user), discount_in)
    return success_response("Discount applied", room_service.format_room_response(room))


@router.delete("/{room_id}")
async def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    room_service.soft_delete(db, _managed_room(db, room_id, current_user))
    return success_response("Room deleted successfully")
