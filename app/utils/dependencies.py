from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import Optional

from database.init import get_db
from database.models.user_model import User
from config import ALGORITHM, SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from enums.user_role import UserRole
from utils.exceptions import AuthenticationError, AuthorizationError

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/signin", auto_error=False)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

AUTH_COOKIE_NAME = "authToken"


def hash_password(password):
    return pwd_context.hash(password)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({"sub": user.email, "id": user.id, "role": user.role})


def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = token or request.cookies.get(AUTH_COOKIE_NAME)
    if not token:
        raise AuthenticationError("No token provided. Please login first.")

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationError("Token has expired. Please login again.")
    except JWTError:
        raise AuthenticationError("Invalid token. Please login again.")

    email = payload.get("sub")
    if email is None:
        raise AuthenticationError("Invalid credentials")

    user = db.query(User).filter_by(email=email).first()
    if user is None or not user.is_active:
        raise AuthenticationError("User not found")

    return user


def require_roles(*roles: UserRole):
    """Dependency factory restricting a route to the given roles."""
    allowed = {role.value for role in roles}

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise AuthorizationError("Access denied")
        return current_user

    return checker


admin_required = require_roles(UserRole.ADMIN)
