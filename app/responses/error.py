from fastapi import status
from typing import Any
from .base import build_response


def error_response(status_code: int, message: str, errors: Any = None):
    return build_response(status_code, success=False, message=message, errors=errors)


def bad_request_error(error: str = "Bad request", errors: Any = None):
    return error_response(status.HTTP_400_BAD_REQUEST, error, errors)


def conflict_error(error: str = "Resource already exists"):
    return error_response(status.HTTP_409_CONFLICT, error)


def not_found_error(error: str = "Resource not found"):
    return error_response(status.HTTP_404_NOT_FOUND, error)


def unauthorized_error(error: str = "Invalid credentials"):
    return error_response(status.HTTP_401_UNAUTHORIZED, error)


def internal_server_error(error: str = "Internal server error"):
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, error)


def forbidden_error(error: str = "Access denied"):
    return error_response(status.HTTP_403_FORBIDDEN, error)
