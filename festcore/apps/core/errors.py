from __future__ import annotations

from typing import Any, Optional


class ApiError(Exception):
    """
    Error de dominio que la capa HTTP traduce a una respuesta JSON
    {"error": <mensaje>, "details": <opcional>} con su código de estado.
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request"


class ValidationFailed(BadRequest):
    default_message = "Invalid input"

    @classmethod
    def from_form(cls, form, message: Optional[str] = None) -> "ValidationFailed":
        details = {
            field: [str(msg) for msg in msgs]
            for field, msgs in form.errors.items()
        }
        return cls(message or cls.default_message, details=details)


class AuthenticationFailed(ApiError):
    status_code = 401
    default_message = "Authentication required"


class AccessDenied(ApiError):
    status_code = 403
    default_message = "Access denied"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Conflict"


class ServiceError(ApiError):
    status_code = 500
    default_message = "Service unavailable"
