"""
Database system type to GraphQL scalar mapping.
"""

from typing import Any, Iterable

import graphene
from graphql.language import ast

# Mapping of introspected system type names to GraphQL scalar types
SYSTEM_TYPE_MAP = {
    "int": graphene.Int,
    "smallint": graphene.Int,
    "bigint": graphene.Int,
    "long": graphene.Int,
    "float": graphene.Float,
    "real": graphene.Float,
    "decimal": graphene.Decimal,
    "money": graphene.Decimal,
    "bool": graphene.Boolean,
    "bit": graphene.Boolean,
    "str": graphene.String,
    "varchar": graphene.String,
    "nvarchar": graphene.String,
    "text": graphene.String,
    "date": graphene.Date,
    "datetime": graphene.DateTime,
    "time": graphene.Time,
    "uuid": graphene.UUID,
    "uniqueidentifier": graphene.UUID,
    "bytes": graphene.Base64,
    "json": graphene.JSONString,
    "id": graphene.ID,
}

BUILTIN_SCALARS = frozenset(
    scalar._meta.name
    for scalar in (graphene.Int, graphene.Float, graphene.String, graphene.Boolean, graphene.ID)
)


def graphql_type_name(system_type: str) -> str:
    """Return the GraphQL scalar name for a system type, defaulting to String."""
    scalar = SYSTEM_TYPE_MAP.get(str(system_type).strip().lower(), graphene.String)
    return scalar._meta.name


def coerce_default(value: Any, type_name: str) -> Any:
    """Coerce a configured default (often a string) to the scalar's Python type."""
    if not isinstance(value, str):
        return value
    try:
        if type_name == "Int":
            return int(value)
        if type_name == "Float":
            return float(value)
    except ValueError:
        return value
    if type_name == "Boolean" and value.lower() in {"true", "false"}:
        return value.lower() == "true"
    return value


def value_node(value: Any) -> ast.ValueNode:
    """Build a literal value node for a configured default value."""
    if value is None:
        return ast.NullValueNode()
    if isinstance(value, bool):
        return ast.BooleanValueNode(value=value)
    if isinstance(value, int):
        return ast.IntValueNode(value=str(value))
    if isinstance(value, float):
        return ast.FloatValueNode(value=repr(value))
    return ast.StringValueNode(value=str(value))


def scalar_definitions(type_names: Iterable[str]) -> list[ast.ScalarTypeDefinitionNode]:
    """Declarations for the non-builtin scalars among ``type_names``."""
    return [
        ast.ScalarTypeDefinitionNode(name=ast.NameNode(value=name), directives=())
        for name in sorted(set(type_names) - BUILTIN_SCALARS)
    ]
