from sqlalchemy.orm import Session

from database.models import User
from enums.user_role import UserRole
from schemas.auth_schema import UserCreate
from utils.dependencies import hash_password, verify_password
from utils.exceptions import AuthenticationError, ConflictError


def create_user(payload: UserCreate, db: Session, role: UserRole = None) -> User:
    if get_user_by_email(payload.email, db):
        raise ConflictError("User already exists")

    user = User(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        role=(role or payload.role).value,
        hashed_password=hash_password(payload.password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def authenticate_user(email: str, password: str, db: Session) -> User:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        raise AuthenticationError("Invalid credentials")
    return user


def get_user_by_email(email: str, db: Session):
    return db.query(User).filter_by(email=email).first()


def get_user_by_id(user_id: int, db: Session):
    return db.query(User).filter(User.id == user_id).first()
