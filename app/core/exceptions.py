"""
Application errors.

Each subclass fixes its HTTP status and machine-readable code; callers only
pass the human-readable message and, where it helps the client, the field.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Codes returned alongside every error response"""

    # 401
    AUTH_INVALID_CREDENTIALS = "AUTH_INVALID_CREDENTIALS"
    AUTH_NOT_AUTHENTICATED = "AUTH_NOT_AUTHENTICATED"

    # 403
    AUTHZ_FORBIDDEN = "AUTHZ_FORBIDDEN"
    AUTHZ_NOT_OWNER = "AUTHZ_NOT_OWNER"
    AUTHZ_NOT_PARTICIPANT = "AUTHZ_NOT_PARTICIPANT"

    # 404, 409
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"

    # 400, 422
    VALIDATION_ERROR = "VALIDATION_ERROR"
    VALIDATION_INVALID_FORMAT = "VALIDATION_INVALID_FORMAT"

    # 5xx
    SERVER_ERROR = "SERVER_ERROR"
    SERVER_UNAVAILABLE = "SERVER_UNAVAILABLE"


class AppException(Exception):
    """Base class for errors that leave the API as a structured response."""

    status_code: int = 500
    code: ErrorCode = ErrorCode.SERVER_ERROR
    default_message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        metadata: dict[str, Any] | None = None,
    ):
        self.message = message or self.default_message
        self.field = field
        self.metadata = metadata or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        response: dict[str, Any] = {
            "detail": self.message,
            "code": self.code.value,
        }
        if self.field:
            response["field"] = self.field
        if self.metadata:
            response["metadata"] = self.metadata
        return response


# 401


class AuthenticationError(AppException):
    status_code = 401
    code = ErrorCode.AUTH_NOT_AUTHENTICATED
    default_message = "Authentication required"


class InvalidCredentialsError(AuthenticationError):
    code = ErrorCode.AUTH_INVALID_CREDENTIALS
    default_message = "Incorrect email or password"


# 403


class AuthorizationError(AppException):
    status_code = 403
    code = ErrorCode.AUTHZ_FORBIDDEN
    default_message = "You are not allowed to perform this action"


class NotOwnerError(AuthorizationError):
    """Acting on a listing that belongs to someone else"""

    code = ErrorCode.AUTHZ_NOT_OWNER
    default_message = "Only the owner can modify this announcement"


class NotParticipantError(AuthorizationError):
    """Viewing or writing to a conversation the viewer is not part of"""

    code = ErrorCode.AUTHZ_NOT_PARTICIPANT
    default_message = "You are not a participant of this conversation"


# 404, 409


class NotFoundError(AppException):
    status_code = 404
    code = ErrorCode.RESOURCE_NOT_FOUND
    default_message = "Requested resource was not found"

    def __init__(self, message: str | None = None, resource: str | None = None):
        super().__init__(
            message=message,
            metadata={"resource": resource} if resource else None,
        )


class ConflictError(AppException):
    status_code = 409
    code = ErrorCode.RESOURCE_CONFLICT
    default_message = "The request conflicts with existing data"


# 422


class ValidationError(AppException):
    status_code = 422
    code = ErrorCode.VALIDATION_ERROR
    default_message = "Please check the submitted data"


class InvalidFormatError(ValidationError):
    """Unsupported upload type or malformed value"""

    code = ErrorCode.VALIDATION_INVALID_FORMAT
    default_message = "Invalid data format"


# 5xx


class ServerError(AppException):
    pass
