"""
Create mutation builder.
"""

from graphql.language import ast

from ...entities.types import DatabaseType, Entity
from ..naming import (
    CREATE_MUTATION_PREFIX,
    has_default_value,
    input_type_name,
    is_auto_generated_field,
    is_nullable_type,
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
    scalar_fields,
)


def _is_optional_on_create(field: ast.FieldDefinitionNode, database_type: DatabaseType) -> bool:
    if is_nullable_type(field.type):
        return True
    return database_type.is_relational and has_default_value(field)


def build_create_input(
    object_type: ast.ObjectTypeDefinitionNode,
    root: ast.DocumentNode,
    database_type: DatabaseType,
    entity: Entity,
) -> ast.InputObjectTypeDefinitionNode:
    """
    Input type for inserting one record.

    Database-generated fields are left out. Nullable fields, and on relational
    dialects fields with a database default, are optional.
    """
    fields = []
    for field in scalar_fields(object_type, root):
        if is_auto_generated_field(field):
            continue
        type_node = (
            nullable(field.type)
            if _is_optional_on_create(field, database_type)
            else non_null(field.type)
        )
        fields.append(input_value(field.name.value, type_node))
    return input_object_type(
        input_type_name(CREATE_MUTATION_PREFIX, entity),
        fields,
        f"Input type for creating {object_type.name.value}",
    )


def build_create_mutation(
    object_type: ast.ObjectTypeDefinitionNode,
    root: ast.DocumentNode,
    database_type: DatabaseType,
    entity: Entity,
    roles: frozenset[str],
    inputs: dict[str, ast.InputObjectTypeDefinitionNode],
) -> ast.FieldDefinitionNode:
    """
    ``create<Type>(item: Create<Type>Input!): <Type>``

    The input type is registered in ``inputs`` unless a type of the same name
    was already built during this pass.
    """
    input_name = input_type_name(CREATE_MUTATION_PREFIX, entity)
    input_type = inputs.get(input_name)
    if input_type is None:
        input_type = build_create_input(object_type, root, database_type, entity)
        if input_type.fields:
            inputs[input_name] = input_type

    arguments = []
    if input_type.fields:
        arguments.append(
            input_value(
                INPUT_ARGUMENT_NAME,
                non_null(named_type(input_name)),
                f"Input representing all the fields for creating {object_type.name.value}",
            )
        )
    return field_definition(
        mutation_field_name(CREATE_MUTATION_PREFIX, entity),
        named_type(object_type.name.value),
        arguments,
        roles,
        f"Creates a new {object_type.name.value}",
    )
