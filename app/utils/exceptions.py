from typing import Any, Optional

from fastapi import status


class AppError(Exception):
    """Operational error raised by services and mapped to a response at the app boundary."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Any = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class StateError(AppError):
    """Operation is not valid for the current lifecycle state."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid state transition"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InsufficientInventoryError(ConflictError):
    # Surfaced as 400 so the client can pick fewer rooms
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Not enough rooms available"


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


class InventoryInvariantError(InternalError):
    default_message = "Room inventory is inconsistent"
