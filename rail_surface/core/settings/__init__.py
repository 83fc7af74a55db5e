"""
Settings package for rail-surface.
"""

from .runtime_settings import (
    DataSourceSettings,
    GraphQLSettings,
    ObservabilitySettings,
    PermissionSettings,
    RestSettings,
    RuntimeSettings,
)

__all__ = [
    "DataSourceSettings",
    "GraphQLSettings",
    "ObservabilitySettings",
    "PermissionSettings",
    "RestSettings",
    "RuntimeSettings",
]
