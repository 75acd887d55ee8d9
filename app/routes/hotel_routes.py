from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from database.init import get_db
from database.models.user_model import User
from enums.hotel_status import HotelStatus
from enums.user_role import UserRole
from schemas.hotel_schema import HotelCreate, HotelReject, HotelResponse, HotelUpdate
from services.hotel_service import HotelService
from utils.dependencies import get_current_user, require_roles
from responses.success import created_response, data_response, paginated_response, success_response

router = APIRouter(prefix="/hotels", tags=["Hotels"])
hotel_service = HotelService()

owner_required = require_roles(UserRole.HOTEL_OWNER, UserRole.ADMIN)
moderator_required = require_roles(UserRole.MODERATOR, UserRole.ADMIN)


@router.post("")
async def create_hotel(
    hotel_in: HotelCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    hotel = hotel_service.create_hotel(db, current_user, hotel_in)
    return created_response("Hotel created successfully", HotelResponse.model_validate(hotel))


@router.get("")
async def list_hotels(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    city: Optional[str] = None,
    status: Optional[HotelStatus] = None,
    db: Session = Depends(get_db),
):
    hotels, total = hotel_service.get_hotels(db, page, limit, city=city, status=status)
    return paginated_response(
        [HotelResponse.model_validate(h) for h in hotels], total, page, limit
    )


@router.get("/mine")
async def my_hotels(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    hotels, total = hotel_service.get_hotels(db, page, limit, owner_id=current_user.id)
    return paginated_response(
        [HotelResponse.model_validate(h) for h in hotels], total, page, limit
    )


@router.get("/{hotel_id}")
async def get_hotel(hotel_id: int, db: Session = Depends(get_db)):
    hotel = hotel_service.get_or_404(db, hotel_id)
    return data_response(HotelResponse.model_validate(hotel))


@router.patch("/{hotel_id}")
async def update_hotel(
    hotel_id: int,
    hotel_in: HotelUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    hotel = hotel_service.update_hotel(db, hotel_service.get_or_404(db, hotel_id), hotel_in, current_user)
    return success_response("Hotel updated successfully", HotelResponse.model_validate(hotel))


@router.patch("/{hotel_id}/approve")
async def approve_hotel(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(moderator_required),
):
    hotel = hotel_service.approve(db, hotel_service.get_or_404(db, hotel_id))
    return success_response("Hotel approved", HotelResponse.model_validate(hotel))


@router.patch("/{hotel_id}/reject")
async def reject_hotel(
    hotel_id: int,
    payload: HotelReject,
    db: Session = Depends(get_db),
    current_user: User = Depends(moderator_required),
):
    hotel = hotel_service.reject(db, hotel_service.get_or_404(db, hotel_id), payload.reason)
    return success_response("Hotel rejected", HotelResponse.model_validate(hotel))


@router.delete("/{hotel_id}")
async def delete_hotel(
    hotel_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    hotel = hotel_service.get_or_404(db, hotel_id)
    hotel_service.ensure_manager(hotel, current_user)
    hotel_service.soft_delete(db, hotel)
    return success_response("Hotel deleted successfully")
