"""
AST construction helpers shared by the Query and Mutation builders.
"""

from typing import Iterable, Mapping, Optional

from graphql.language import ast

from ..core.exceptions import InitializationError
from ..entities.types import DatabaseObject, DatabaseStoredProcedure, DatabaseType, Entity
from .directives import build_authorize_directive
from .naming import (
    name_node,
    named_type,
    non_null,
    object_type_to_entity_name,
    primary_key_fields,
    unwrap_named_type,
)

# Within a mutation, ``item`` holds the values used to mutate the record,
# typed as the operation's input type (for example CreateBookInput).
INPUT_ARGUMENT_NAME = "item"
ID_ARGUMENT_NAME = "id"
PARTITION_KEY_ARGUMENT_NAME = "_partitionKeyValue"


def description_node(text: Optional[str]) -> Optional[ast.StringValueNode]:
    if not text:
        return None
    return ast.StringValueNode(value=text, block=False)


def input_value(
    name: str,
    type_node: ast.TypeNode,
    description: Optional[str] = None,
    default_value: Optional[ast.ValueNode] = None,
) -> ast.InputValueDefinitionNode:
    return ast.InputValueDefinitionNode(
        name=name_node(name),
        description=description_node(description),
        type=type_node,
        default_value=default_value,
        directives=(),
    )


def field_definition(
    name: str,
    type_node: ast.TypeNode,
    arguments: Iterable[ast.InputValueDefinitionNode],
    roles: Iterable[str],
    description: Optional[str] = None,
) -> ast.FieldDefinitionNode:
    """Build a root field restricted to exactly ``roles``."""
    return ast.FieldDefinitionNode(
        name=name_node(name),
        description=description_node(description),
        arguments=tuple(arguments),
        type=type_node,
        directives=(build_authorize_directive(roles),),
    )


def input_object_type(
    name: str,
    fields: Iterable[ast.InputValueDefinitionNode],
    description: Optional[str] = None,
) -> ast.InputObjectTypeDefinitionNode:
    return ast.InputObjectTypeDefinitionNode(
        name=name_node(name),
        description=description_node(description),
        directives=(),
        fields=tuple(fields),
    )


def composite_type_names(root: ast.DocumentNode) -> frozenset[str]:
    """Names of object, interface and union types defined in ``root``."""
    composite = (
        ast.ObjectTypeDefinitionNode,
        ast.InterfaceTypeDefinitionNode,
        ast.UnionTypeDefinitionNode,
    )
    return frozenset(
        definition.name.value
        for definition in root.definitions
        if isinstance(definition, composite)
    )


def scalar_fields(
    object_type: ast.ObjectTypeDefinitionNode, root: ast.DocumentNode
) -> list[ast.FieldDefinitionNode]:
    """Fields of ``object_type`` that are not relationships to other types."""
    composite = composite_type_names(root)
    return [
        field
        for field in object_type.fields or ()
        if unwrap_named_type(field.type) not in composite
    ]


def primary_key_arguments(
    object_type: ast.ObjectTypeDefinitionNode,
    entity: Entity,
    database_type: DatabaseType,
    operation_name: str,
) -> list[ast.InputValueDefinitionNode]:
    """
    Arguments identifying a single record.

    Relational dialects use the ``@primaryKey`` fields; the document store uses
    the item id plus its partition key value.
    """
    if not database_type.is_relational:
        return [
            input_value(ID_ARGUMENT_NAME, non_null(named_type("ID")), "Id of the item"),
            input_value(
                PARTITION_KEY_ARGUMENT_NAME,
                non_null(named_type("String")),
                "Partition key value of the item",
            ),
        ]

    keys = primary_key_fields(object_type)
    if not keys:
        raise InitializationError(
            f"Entity '{entity.name}' has no primary key fields; "
            f"cannot build the {operation_name} operation."
        )
    return [
        input_value(field.name.value, non_null(field.type), f"Input representing {field.name.value}")
        for field in keys
    ]


def resolve_entity(
    object_type: ast.ObjectTypeDefinitionNode, entities: Mapping[str, Entity]
) -> Entity:
    """Entity metadata behind an entity-backed object type."""
    entity_name = object_type_to_entity_name(object_type)
    entity = entities.get(entity_name)
    if entity is None:
        raise InitializationError(
            f"Object type '{object_type.name.value}' maps to entity '{entity_name}', "
            "which has no entity metadata."
        )
    return entity


def resolve_stored_procedure(
    entity: Entity, database_objects: Optional[Mapping[str, DatabaseObject]]
) -> DatabaseStoredProcedure:
    """
    Introspected descriptor of a stored procedure entity.

    Without it the procedure's parameters are unknown, which means schema
    introspection did not complete before synthesis started.
    """
    db_object = database_objects.get(entity.name) if database_objects is not None else None
    if not isinstance(db_object, DatabaseStoredProcedure):
        raise InitializationError(
            "GraphQL schema creation for stored procedures requires the associated "
            f"database object's schema metadata (entity '{entity.name}')."
        )
    return db_object
