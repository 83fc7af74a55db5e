"""
Typed runtime settings.
"""

from dataclasses import dataclass, field
from typing import Any

from ...config_proxy import get_setting
from ...entities.types import DatabaseType
from ..exceptions import ConfigurationError
from .base import _section_kwargs


@dataclass
class DataSourceSettings:
    """Target database dialect."""

    database_type: str = "mssql"

    @property
    def dialect(self) -> DatabaseType:
        try:
            return DatabaseType(str(self.database_type).lower())
        except ValueError:
            raise ConfigurationError(f"Unsupported database type: {self.database_type!r}.")

    @classmethod
    def from_settings(cls) -> "DataSourceSettings":
        return cls(**_section_kwargs(cls, "data_source"))


@dataclass
class RestSettings:
    """REST surface settings; ``path`` is the route prefix."""

    enabled: bool = True
    path: str = "/api"

    def __post_init__(self) -> None:
        if not str(self.path).startswith("/"):
            raise ConfigurationError(f"REST path must start with '/': {self.path!r}.")

    @classmethod
    def from_settings(cls) -> "RestSettings":
        return cls(**_section_kwargs(cls, "rest_settings"))


@dataclass
class GraphQLSettings:
    """GraphQL surface settings; a disabled surface refuses synthesis."""

    enabled: bool = True

    @classmethod
    def from_settings(cls) -> "GraphQLSettings":
        return cls(**_section_kwargs(cls, "graphql_settings"))


@dataclass
class PermissionSettings:
    case_insensitive_roles: bool = False

    @classmethod
    def from_settings(cls) -> "PermissionSettings":
        return cls(**_section_kwargs(cls, "permission_settings"))


@dataclass
class ObservabilitySettings:
    enable_sentry: bool = False

    @classmethod
    def from_settings(cls) -> "ObservabilitySettings":
        return cls(**_section_kwargs(cls, "observability_settings"))


@dataclass
class RuntimeSettings:
    """All settings sections plus the raw entity and database object mappings."""

    data_source: DataSourceSettings = field(default_factory=DataSourceSettings)
    rest: RestSettings = field(default_factory=RestSettings)
    graphql: GraphQLSettings = field(default_factory=GraphQLSettings)
    permissions: PermissionSettings = field(default_factory=PermissionSettings)
    observability: ObservabilitySettings = field(default_factory=ObservabilitySettings)
    entities: dict[str, Any] = field(default_factory=dict)
    database_objects: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_settings(cls) -> "RuntimeSettings":
        return cls(
            data_source=DataSourceSettings.from_settings(),
            rest=RestSettings.from_settings(),
            graphql=GraphQLSettings.from_settings(),
            permissions=PermissionSettings.from_settings(),
            observability=ObservabilitySettings.from_settings(),
            entities=dict(get_setting("entities", {}) or {}),
            database_objects=dict(get_setting("database_objects", {}) or {}),
        )
