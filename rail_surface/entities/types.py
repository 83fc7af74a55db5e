"""
Type definitions for entity metadata.

This module contains the closed enums and frozen dataclasses describing an
entity and the database object behind it:
- DatabaseType: Target database dialect
- EntitySourceType: Kind of database object (table, view, stored procedure)
- GraphQLOperation: Root operation a stored procedure is exposed under
- EntityActionOperation: Operations a role can be granted on an entity
- ColumnDefinition / ParameterDefinition: Introspected column and parameter metadata
- DatabaseTable / DatabaseView / DatabaseStoredProcedure: Database object descriptors
- Entity: Configured mapping from an API object to a database object
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class DatabaseType(Enum):
    """Supported database dialects."""

    MSSQL = "mssql"
    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    DWSQL = "dwsql"
    COSMOSDB_NOSQL = "cosmosdb_nosql"

    @property
    def is_relational(self) -> bool:
        return self is not DatabaseType.COSMOSDB_NOSQL


class EntitySourceType(Enum):
    """Kind of database object an entity is backed by."""

    TABLE = "table"
    VIEW = "view"
    STORED_PROCEDURE = "stored-procedure"


class GraphQLOperation(Enum):
    """Root operation type a stored procedure entity is exposed under."""

    QUERY = "query"
    MUTATION = "mutation"


class EntityActionOperation(Enum):
    """Operations that can be granted to a role on an entity."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    EXECUTE = "execute"
    # Update issued through a GraphQL mutation; authorized as UPDATE.
    UPDATE_GRAPHQL = "update_graphql"
    # Configuration wildcard, expanded when the permission map is built.
    ALL = "*"


TABLE_OPERATIONS = (
    EntityActionOperation.CREATE,
    EntityActionOperation.READ,
    EntityActionOperation.UPDATE,
    EntityActionOperation.DELETE,
)
STORED_PROCEDURE_OPERATIONS = (EntityActionOperation.EXECUTE,)
MUTATION_OPERATIONS = (
    EntityActionOperation.CREATE,
    EntityActionOperation.UPDATE,
    EntityActionOperation.DELETE,
)


@dataclass(frozen=True)
class ColumnDefinition:
    """Introspected metadata for a table, view or result-set column."""

    name: str
    system_type: str
    is_nullable: bool = False
    is_auto_generated: bool = False
    has_default: bool = False
    default_value: Any = None
    is_read_only: bool = False


@dataclass(frozen=True)
class ParameterDefinition:
    """Introspected metadata for a stored procedure parameter."""

    name: str
    system_type: str
    has_config_default: bool = False
    config_default_value: Any = None


@dataclass(frozen=True)
class DatabaseTable:
    """Descriptor for a table."""

    schema_name: str
    name: str
    columns: tuple[ColumnDefinition, ...] = ()
    primary_keys: tuple[str, ...] = ()

    source_type = EntitySourceType.TABLE

    @property
    def full_name(self) -> str:
        return f"{self.schema_name}.{self.name}" if self.schema_name else self.name

    def get_column(self, name: str) -> Optional[ColumnDefinition]:
        for column in self.columns:
            if column.name == name:
                return column
        return None


@dataclass(frozen=True)
class DatabaseView(DatabaseTable):
    """Descriptor for a view. Shaped like a table; keys come from configuration."""

    source_type = EntitySourceType.VIEW


@dataclass(frozen=True)
class DatabaseStoredProcedure:
    """Descriptor for a stored procedure: its parameters and result set."""

    schema_name: str
    name: str
    parameters: tuple[ParameterDefinition, ...] = ()
    result_columns: tuple[ColumnDefinition, ...] = ()

    source_type = EntitySourceType.STORED_PROCEDURE

    @property
    def full_name(self) -> str:
        return f"{self.schema_name}.{self.name}" if self.schema_name else self.name


DatabaseObject = Union[DatabaseTable, DatabaseView, DatabaseStoredProcedure]


@dataclass(frozen=True)
class EntitySource:
    """Database object reference of an entity."""

    object: str
    type: EntitySourceType = EntitySourceType.TABLE
    parameters: tuple[tuple[str, Any], ...] = ()
    key_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityGraphQLOptions:
    """GraphQL exposure settings of an entity."""

    enabled: bool = True
    singular: Optional[str] = None
    plural: Optional[str] = None
    operation: Optional[GraphQLOperation] = None


@dataclass(frozen=True)
class EntityRestOptions:
    """REST exposure settings of an entity."""

    enabled: bool = True
    path: Optional[str] = None
    methods: tuple[str, ...] = ()


@dataclass(frozen=True)
class EntityPermission:
    """Actions granted to one role on an entity."""

    role: str
    actions: tuple[EntityActionOperation, ...] = ()


@dataclass(frozen=True)
class Entity:
    """A configured mapping from an API-level object to a database object."""

    name: str
    source: EntitySource
    graphql: EntityGraphQLOptions = field(default_factory=EntityGraphQLOptions)
    rest: EntityRestOptions = field(default_factory=EntityRestOptions)
    permissions: tuple[EntityPermission, ...] = ()

    @property
    def is_stored_procedure(self) -> bool:
        return self.source.type is EntitySourceType.STORED_PROCEDURE

    @property
    def graphql_operation(self) -> GraphQLOperation:
        """Root operation for a stored procedure; unset means MUTATION."""
        return self.graphql.operation or GraphQLOperation.MUTATION

    @property
    def singular_name(self) -> str:
        return self.graphql.singular or self.name

    @property
    def plural_name(self) -> str:
        return self.graphql.plural or f"{self.singular_name}s"

    @property
    def rest_path(self) -> str:
        path = self.rest.path or self.name
        return path.lstrip("/")


__all__ = [
    "DatabaseType",
    "EntitySourceType",
    "GraphQLOperation",
    "EntityActionOperation",
    "TABLE_OPERATIONS",
    "STORED_PROCEDURE_OPERATIONS",
    "MUTATION_OPERATIONS",
    "ColumnDefinition",
    "ParameterDefinition",
    "DatabaseTable",
    "DatabaseView",
    "DatabaseStoredProcedure",
    "DatabaseObject",
    "EntitySource",
    "EntityGraphQLOptions",
    "EntityRestOptions",
    "EntityPermission",
    "Entity",
]
