"""
Delete mutation builder.
"""

from graphql.language import ast

from ...entities.types import DatabaseType, Entity
from ..naming import DELETE_MUTATION_PREFIX, mutation_field_name, named_type
from ..fields import field_definition, primary_key_arguments


def build_delete_mutation(
    object_type: ast.ObjectTypeDefinitionNode,
    database_type: DatabaseType,
    entity: Entity,
    roles: frozenset[str],
) -> ast.FieldDefinitionNode:
    """``delete<Type>(<key arguments>): <Type>``"""
    return field_definition(
        mutation_field_name(DELETE_MUTATION_PREFIX, entity),
        named_type(object_type.name.value),
        primary_key_arguments(object_type, entity, database_type, "delete"),
        roles,
        f"Delete a {object_type.name.value}",
    )
