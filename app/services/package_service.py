from typing import List, Optional, Tuple

import structlog
from sqlalchemy.orm import Session

from database.models.package_model import Package
from database.models.user_model import User
from enums.package_status import PackageCategory, PackageStatus
from enums.user_role import UserRole
from schemas.package_schema import PackageCreate, PackageUpdate
from services.base_service import BaseService
from services.pricing_service import PackageQuote, price_package
from utils.exceptions import AuthorizationError, StateError, ValidationError
from utils.id_generator import slugify

logger = structlog.get_logger(__name__)


class PackageService(BaseService):
    not_found_message = "Package not found"

    def __init__(self):
        super().__init__(Package)

    def unique_slug(self, db: Session, title: str) -> str:
        base = slugify(title) or "package"
        slug = base
        counter = 1
        while db.query(Package.id).filter(Package.slug == slug).first() is not None:
            counter += 1
            slug = f"{base}-{counter}"
        return slug

    def create_package(self, db: Session, package_in: PackageCreate, user: User) -> Package:
        package = self.create(
            db,
            package_in,
            slug=self.unique_slug(db, package_in.title),
            status=PackageStatus.ACTIVE.value,
            created_by=user.id,
        )
        logger.info("package_created", package_id=package.id, slug=package.slug)
        return package

    def get_packages(
        self,
        db: Session,
        page: int = 1,
        limit: int = 20,
        category: Optional[PackageCategory] = None,
    ) -> Tuple[List[Package], int]:
        query = self.query(db).filter(Package.status == PackageStatus.ACTIVE.value)
        if category is not None:
            query = query.filter(Package.category == category.value)
        return self.paginate(query.order_by(Package.id.desc()), page, limit)

    def ensure_author(self, package: Package, user: User) -> None:
        if user.role != UserRole.ADMIN.value and package.created_by != user.id:
            raise AuthorizationError("Not authorized to manage this package")

    def update_package(self, db: Session, package: Package, package_in: PackageUpdate, user: User) -> Package:
        self.ensure_author(package, user)
        changes = package_in.model_dump(exclude_unset=True, mode="json")
        if not changes:
            raise ValidationError("No changes provided")
        for field, value in changes.items():
            if value is None and field != "description":
                raise ValidationError(f"{field} cannot be cleared")

        group_size_min = changes.get("group_size_min", package.group_size_min)
        group_size_max = changes.get("group_size_max", package.group_size_max)
        if group_size_min > group_size_max:
            raise ValidationError("group_size_min cannot exceed group_size_max")

        # The slug is fixed at creation
        package = self.update(db, package, package_in)
        logger.info("package_updated", package_id=package.id, fields=sorted(changes))
        return package

    def delete_package(self, db: Session, package: Package, user: User) -> None:
        self.ensure_author(package, user)
        self.soft_delete(db, package)
        logger.info("package_deleted", package_id=package.id)

    def quote(self, package: Package, number_of_people: int) -> PackageQuote:
        if package.status != PackageStatus.ACTIVE.value:
            raise StateError("Package is not available for booking")
        return price_package(package, number_of_people)
