"""
REST routing package.
"""

from .routing import (
    HTTP_METHOD_OPERATIONS,
    RestRequest,
    RestRouter,
    RouteResolution,
    resolve_route,
)

__all__ = [
    "HTTP_METHOD_OPERATIONS",
    "RestRequest",
    "RestRouter",
    "RouteResolution",
    "resolve_route",
]
