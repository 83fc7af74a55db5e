"""
Naming conventions and AST helpers shared by the schema builders.
"""

import re

from graphene.utils.str_converters import to_camel_case
from graphql.language import ast

from ..entities.types import Entity
from .directives import (
    AUTO_GENERATED_DIRECTIVE,
    DEFAULT_VALUE_DIRECTIVE,
    MODEL_DIRECTIVE,
    MODEL_NAME_ARGUMENT,
    PRIMARY_KEY_DIRECTIVE,
    find_directive,
    get_directive_argument,
    has_directive,
)

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_]")

CREATE_MUTATION_PREFIX = "create"
UPDATE_MUTATION_PREFIX = "update"
DELETE_MUTATION_PREFIX = "delete"
EXECUTE_MUTATION_PREFIX = "execute"
PK_QUERY_SUFFIX = "_by_pk"
CONNECTION_SUFFIX = "Connection"
INPUT_SUFFIX = "Input"


def is_model_type(node: ast.DefinitionNode) -> bool:
    """True for object types annotated with ``@model``."""
    return isinstance(node, ast.ObjectTypeDefinitionNode) and has_directive(
        node, MODEL_DIRECTIVE
    )


def object_type_to_entity_name(node: ast.ObjectTypeDefinitionNode) -> str:
    """
    Resolve the entity an object type was generated from.

    The ``@model(name:)`` argument wins; otherwise the type name is the entity name.
    """
    directive = find_directive(node, MODEL_DIRECTIVE)
    model_name = get_directive_argument(directive, MODEL_NAME_ARGUMENT)
    return str(model_name) if model_name else node.name.value


def format_name_for_object(name: str) -> str:
    """Strip characters GraphQL names cannot hold and capitalize the first letter."""
    sanitized = _INVALID_NAME_CHARS.sub("", name.replace(" ", "_"))
    sanitized = to_camel_case(sanitized.strip("_")) if "_" in sanitized else sanitized
    if not sanitized:
        return sanitized
    return sanitized[0].upper() + sanitized[1:]


def format_name_for_field(name: str) -> str:
    object_name = format_name_for_object(name)
    if not object_name:
        return object_name
    return object_name[0].lower() + object_name[1:]


def get_defined_singular_name(entity: Entity) -> str:
    return format_name_for_object(entity.singular_name)


def get_defined_plural_name(entity: Entity) -> str:
    return format_name_for_object(entity.plural_name)


def mutation_field_name(prefix: str, entity: Entity) -> str:
    return f"{prefix}{get_defined_singular_name(entity)}"


def input_type_name(prefix: str, entity: Entity) -> str:
    return f"{prefix.capitalize()}{get_defined_singular_name(entity)}{INPUT_SUFFIX}"


def connection_type_name(entity: Entity) -> str:
    return f"{get_defined_singular_name(entity)}{CONNECTION_SUFFIX}"


def name_node(value: str) -> ast.NameNode:
    return ast.NameNode(value=value)


def named_type(name: str) -> ast.NamedTypeNode:
    return ast.NamedTypeNode(name=name_node(name))


def non_null(type_node: ast.TypeNode) -> ast.NonNullTypeNode:
    if isinstance(type_node, ast.NonNullTypeNode):
        return type_node
    return ast.NonNullTypeNode(type=type_node)


def nullable(type_node: ast.TypeNode) -> ast.TypeNode:
    if isinstance(type_node, ast.NonNullTypeNode):
        return type_node.type
    return type_node


def list_of(type_node: ast.TypeNode) -> ast.ListTypeNode:
    return ast.ListTypeNode(type=type_node)


def unwrap_named_type(type_node: ast.TypeNode) -> str:
    while not isinstance(type_node, ast.NamedTypeNode):
        type_node = type_node.type
    return type_node.name.value


def is_nullable_type(type_node: ast.TypeNode) -> bool:
    return not isinstance(type_node, ast.NonNullTypeNode)


def is_primary_key_field(field: ast.FieldDefinitionNode) -> bool:
    return has_directive(field, PRIMARY_KEY_DIRECTIVE)


def is_auto_generated_field(field: ast.FieldDefinitionNode) -> bool:
    return has_directive(field, AUTO_GENERATED_DIRECTIVE)


def has_default_value(field: ast.FieldDefinitionNode) -> bool:
    return has_directive(field, DEFAULT_VALUE_DIRECTIVE)


def primary_key_fields(node: ast.ObjectTypeDefinitionNode) -> list[ast.FieldDefinitionNode]:
    return [field for field in node.fields or () if is_primary_key_field(field)]
