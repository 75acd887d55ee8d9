from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from database.init import get_db
from database.models.user_model import User
from enums.package_status import PackageCategory
from enums.user_role import UserRole
from schemas.package_schema import (
    PackageCreate,
    PackageQuoteRequest,
    PackageQuoteResponse,
    PackageResponse,
    PackageUpdate,
)
from services.package_service import PackageService
from utils.dependencies import get_current_user, require_roles
from responses.success import created_response, data_response, paginated_response, success_response

router = APIRouter(prefix="/packages", tags=["Packages"])
package_service = PackageService()

contributor_required = require_roles(UserRole.CONTRIBUTOR, UserRole.ADMIN)


@router.post("")
async def create_package(
    package_in: PackageCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(contributor_required),
):
    package = package_service.create_package(db, package_in, current_user)
    return created_response("Package created successfully", PackageResponse.model_validate(package))


@router.get("")
async def list_packages(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[PackageCategory] = None,
    db: Session = Depends(get_db),
):
    packages, total = package_service.get_packages(db, page, limit, category)
    return paginated_response(
        [PackageResponse.model_validate(p) for p in packages], total, page, limit
    )


@router.get("/{package_id}")
async def get_package(package_id: int, db: Session = Depends(get_db)):
    package = package_service.get_or_404(db, package_id)
    return data_response(PackageResponse.model_validate(package))


@router.patch("/{package_id}")
async def update_package(
    package_id: int,
    package_in: PackageUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    package = package_service.update_package(
        db, package_service.get_or_404(db, package_id), package_in, current_user
    )
    return success_response("Package updated successfully", PackageResponse.model_validate(package))


@router.delete("/{package_id}")
async def delete_package(
    package_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    package_service.delete_package(db, package_service.get_or_404(db, package_id), current_user)
    return success_response("Package deleted successfully")


@router.post("/{package_id}/quote")
async def quote_package(
    package_id: int,
    quote_in: PackageQuoteRequest,
    db: Session = Depends(get_db),
):
    package = package_service.get_or_404(db, package_id)
    quote = package_service.quote(package, quote_in.number_of_people)
    return data_response(
        PackageQuoteResponse(
            package_id=package.id,
            title=package.title,
            number_of_people=quote.group_size,
            price_per_person=quote.price_per_person,
            discount_percentage=quote.discount_percentage,
            total_price=quote.total_price,
        )
    )
