"""
Update mutation builder.
"""

from graphql.language import ast

from ...entities.types import DatabaseType, Entity
from ..naming import (
    UPDATE_MUTATION_PREFIX,
    input_type_name,
    is_auto_generated_field,
    is_primary_key_field,
    mutation_field_name,
    named_type,
    non_null,
    nullable,
)
from ..fields import (
    INPUT_ARGUMENT_NAME,
    field_definition,
    input_object_type,
    input_value,
    primary_key_arguments,
    scalar_fields,
)


def build_update_input(
    object_type: ast.ObjectTypeDefinitionNode,
    root: ast.DocumentNode,
    database_type: DatabaseType,
    entity: Entity,
) -> ast.InputObjectTypeDefinitionNode:
    """
    Input type for modifying one record.

    Relational dialects patch the record: key columns travel as arguments and
    every other field is optional. The document store replaces the whole item
    and keeps declared nullability.
    """
    fields = []
    for field in scalar_fields(object_type, root):
        if is_auto_generated_field(field):
            continue
        if database_type.is_relational and is_primary_key_field(field):
            continue
        type_node = nullable(field.type) if database_type.is_relational else field.type
        fields.append(input_value(field.name.value, type_node))
    return input_object_type(
        input_type_name(UPDATE_MUTATION_PREFIX, entity),
        fields,
        f"Input type for updating {object_type.name.value}",
    )


def build_update_mutation(
    object_type: ast.ObjectTypeDefinitionNode,
    root: ast.DocumentNode,
    database_type: DatabaseType,
    entity: Entity,
    roles: frozenset[str],
    inputs: dict[str, ast.InputObjectTypeDefinitionNode],
) -> ast.FieldDefinitionNode:
    """``update<Type>(<key arguments>, item: Update<Type>Input!): <Type>``"""
    arguments = primary_key_arguments(object_type, entity, database_type, "update")

    input_name = input_type_name(UPDATE_MUTATION_PREFIX, entity)
    input_type = inputs.get(input_name)
    if input_type is None:
        input_type = build_update_input(object_type, root, database_type, entity)
        if input_type.fields:
            inputs[input_name] = input_type

    if input_type.fields:
        arguments.append(
            input_value(
                INPUT_ARGUMENT_NAME,
                non_null(named_type(input_name)),
                f"Input representing all the fields for updating {object_type.name.value}",
            )
        )
    return field_definition(
        mutation_field_name(UPDATE_MUTATION_PREFIX, entity),
        named_type(object_type.name.value),
        arguments,
        roles,
        f"Updates a {object_type.name.value}",
    )
