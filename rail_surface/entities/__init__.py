"""
Entity metadata package.

Exports:
    - Entity and its option dataclasses
    - Database object descriptors (tables, views, stored procedures)
    - RuntimeEntities: immutable entity registry
    - load_runtime_entities / load_database_objects: mapping loaders
"""

from .loader import load_database_objects, load_runtime_entities
from .registry import RuntimeEntities
from .types import (
    ColumnDefinition,
    DatabaseObject,
    DatabaseStoredProcedure,
    DatabaseTable,
    DatabaseType,
    DatabaseView,
    Entity,
    EntityActionOperation,
    EntityGraphQLOptions,
    EntityPermission,
    EntityRestOptions,
    EntitySource,
    EntitySourceType,
    GraphQLOperation,
    ParameterDefinition,
)

__all__ = [
    "ColumnDefinition",
    "DatabaseObject",
    "DatabaseStoredProcedure",
    "DatabaseTable",
    "DatabaseType",
    "DatabaseView",
    "Entity",
    "EntityActionOperation",
    "EntityGraphQLOptions",
    "EntityPermission",
    "EntityRestOptions",
    "EntitySource",
    "EntitySourceType",
    "GraphQLOperation",
    "ParameterDefinition",
    "RuntimeEntities",
    "load_database_objects",
    "load_runtime_entities",
]
