"""
Custom exceptions for API surface synthesis and REST routing.

Every error carries an HTTP status and a stable sub-status code so the
transport layer can translate it into a client response without inspecting
the message text.
"""

from enum import Enum
from http import HTTPStatus
from typing import Any, Optional


class SubStatusCode(str, Enum):
    """Stable sub-status codes matched on by callers and tests."""

    BAD_REQUEST = "BadRequest"
    ENTITY_NOT_FOUND = "EntityNotFound"
    AUTHORIZATION_CHECK_FAILED = "AuthorizationCheckFailed"
    METHOD_NOT_ALLOWED = "MethodNotAllowed"
    ERROR_IN_INITIALIZATION = "ErrorInInitialization"
    CONFIG_VALIDATION_ERROR = "ConfigValidationError"
    UNEXPECTED_ERROR = "UnexpectedError"


class SurfaceError(Exception):
    """Base exception for rail-surface errors."""

    default_status_code = HTTPStatus.INTERNAL_SERVER_ERROR
    default_sub_status_code = SubStatusCode.UNEXPECTED_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[HTTPStatus] = None,
        sub_status_code: Optional[SubStatusCode] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.sub_status_code = sub_status_code or self.default_sub_status_code

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "status": int(self.status_code),
            "code": self.sub_status_code.value,
        }


class InitializationError(SurfaceError):
    """
    Raised when a synthesis pass cannot complete.

    The service cannot safely publish a schema it could not fully build, so
    this maps to 503 and aborts startup rather than a single field.
    """

    default_status_code = HTTPStatus.SERVICE_UNAVAILABLE
    default_sub_status_code = SubStatusCode.ERROR_IN_INITIALIZATION


class ConfigurationError(SurfaceError):
    """Raised when entity or permission configuration is inconsistent."""

    default_status_code = HTTPStatus.SERVICE_UNAVAILABLE
    default_sub_status_code = SubStatusCode.CONFIG_VALIDATION_ERROR


class RouteError(SurfaceError):
    """Raised when a request path cannot be resolved against the REST prefix."""

    default_status_code = HTTPStatus.BAD_REQUEST
    default_sub_status_code = SubStatusCode.BAD_REQUEST

    def __init__(self, route: str):
        super().__init__(f"Invalid Path for route: {route}.")
        self.route = route


class EntityNotFoundError(SurfaceError):
    """Raised when the entity path segment maps to no configured entity."""

    default_status_code = HTTPStatus.NOT_FOUND
    default_sub_status_code = SubStatusCode.ENTITY_NOT_FOUND

    def __init__(self, entity_path: str):
        super().__init__(f"Invalid Entity path: {entity_path}.")
        self.entity_path = entity_path


class AuthorizationError(SurfaceError):
    """Raised when the caller's role may not perform the operation."""

    default_status_code = HTTPStatus.FORBIDDEN
    default_sub_status_code = SubStatusCode.AUTHORIZATION_CHECK_FAILED

    def __init__(self, role: str, entity_name: str, operation: Any):
        operation_name = getattr(operation, "value", operation)
        super().__init__(
            f"Role '{role}' is not authorized to perform {operation_name} on {entity_name}."
        )
        self.role = role
        self.entity_name = entity_name
        self.operation = operation


class MethodNotAllowedError(SurfaceError):
    """Raised when an HTTP verb has no corresponding operation."""

    default_status_code = HTTPStatus.METHOD_NOT_ALLOWED
    default_sub_status_code = SubStatusCode.METHOD_NOT_ALLOWED

    def __init__(self, method: str):
        super().__init__(f"HTTP method {method} is not supported.")
        self.method = method
