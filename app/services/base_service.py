from typing import Type, TypeVar, Optional, List, Tuple
from pydantic import BaseModel
from sqlalchemy.orm import Session, Query

from utils.dates import utcnow
from utils.exceptions import NotFoundError

ModelType = TypeVar('ModelType')


class BaseService:
    """Shared lookups for soft-deletable models (those with a deleted_at column)."""

    not_found_message = "Resource not found"

    def __init__(self, model: Type[ModelType]):
        self.model = model

    def query(self, db: Session) -> Query:
        return db.query(self.model).filter(self.model.deleted_at.is_(None))

    def create(self, db: Session, obj_in, **extra) -> ModelType:
        """
        Create a new record in the database

        Args:
            db: Database session
            obj_in: Either a SQLAlchemy model or a Pydantic schema
            extra: Column values not carried by the schema

        Returns:
            The created model instance
        """
        if isinstance(obj_in, BaseModel):
            db_obj = self.model(**obj_in.model_dump(mode="json"), **extra)
        else:
            db_obj = obj_in

        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get(self, db: Session, id: int) -> Optional[ModelType]:
        return self.query(db).filter(self.model.id == id).first()

    def get_or_404(self, db: Session, id: int) -> ModelType:
        db_obj = self.get(db, id)
        if db_obj is None:
            raise NotFoundError(self.not_found_message)
        return db_obj

    def paginate(self, query: Query, page: int = 1, limit: int = 20) -> Tuple[List[ModelType], int]:
        total = query.count()
        items = query.offset((page - 1) * limit).limit(limit).all()
        return items, total

    def update(self, db: Session, db_obj: ModelType, obj_in: BaseModel) -> ModelType:
        for key, value in obj_in.model_dump(exclude_unset=True, mode="json").items():
            setattr(db_obj, key, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def soft_delete(self, db: Session, db_obj: ModelType) -> ModelType:
        db_obj.deleted_at = utcnow()
        db.commit()
        return db_obj
