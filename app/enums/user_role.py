from enum import Enum


class UserRole(str, Enum):
    USER = "user"
    HOTEL_OWNER = "hotel_owner"
    CONTRIBUTOR = "contributor"
    MODERATOR = "moderator"
    ADMIN = "admin"
