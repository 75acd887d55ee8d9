from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional

from enums.user_role import UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6)
    phone: Optional[str] = None
    role: UserRole = UserRole.USER

    @field_validator("role")
    @classmethod
    def self_service_role(cls, value: UserRole) -> UserRole:
        # Moderators and admins are provisioned, never self-registered
        if value in (UserRole.MODERATOR, UserRole.ADMIN):
            raise ValueError("This role cannot be chosen at signup")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class UserMinimumResponse(BaseModel):
    id: int
    name: str
    email: EmailStr

    model_config = ConfigDict(from_attributes=True)
