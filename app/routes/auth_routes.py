from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schemas.auth_schema import LoginRequest, UserCreate, UserResponse
from database.init import get_db
from database.models.user_model import User
from utils.dependencies import create_user_token, get_current_user
from services.auth_service import authenticate_user, create_user
from responses.success import created_response, data_response

import structlog

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _token_payload(user: User) -> dict:
    return {
        "access_token": create_user_token(user),
        "token_type": "bearer",
        "user": UserResponse.model_validate(user),
    }


@router.post("/signup")
def signup(payload: UserCreate, db: Session = Depends(get_db)):
    user = create_user(payload, db)
    logger.info("user_registered", user_id=user.id, role=user.role)
    return created_response("User registered successfully", _token_payload(user))


@router.post("/signin")
def signin(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate_user(credentials.email, credentials.password, db)
    return data_response(_token_payload(user))


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    """Route for any authenticated user to get their own information"""
    return data_response(UserResponse.model_validate(current_user))
