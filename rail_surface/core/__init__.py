"""Core configuration and error handling for rail-surface."""

from .exceptions import (
    AuthorizationError,
    ConfigurationError,
    EntityNotFoundError,
    InitializationError,
    MethodNotAllowedError,
    RouteError,
    SubStatusCode,
    SurfaceError,
)

__all__ = [
    "SurfaceError",
    "SubStatusCode",
    "InitializationError",
    "ConfigurationError",
    "RouteError",
    "EntityNotFoundError",
    "AuthorizationError",
    "MethodNotAllowedError",
]
