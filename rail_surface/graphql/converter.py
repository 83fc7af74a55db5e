"""
Base schema construction from database object descriptors.

Produces one ``@model``-annotated object type per GraphQL-enabled entity. The
synthesizer accepts any base document in this shape; this converter is what
the export tooling uses when no hand-written base schema is supplied.
"""

import logging
from typing import Mapping, Optional

from graphql.language import ast

from ..core.exceptions import InitializationError
from ..entities.types import (
    ColumnDefinition,
    DatabaseObject,
    DatabaseStoredProcedure,
    DatabaseType,
    Entity,
)
from .directives import (
    AUTO_GENERATED_DIRECTIVE,
    DEFAULT_VALUE_DIRECTIVE,
    MODEL_DIRECTIVE,
    MODEL_NAME_ARGUMENT,
    PRIMARY_KEY_DIRECTIVE,
    build_directive,
)
from .fields import ID_ARGUMENT_NAME
from .naming import get_defined_singular_name, name_node, named_type, non_null
from .scalars import graphql_type_name

logger = logging.getLogger(__name__)


def _column_field(
    column: ColumnDefinition,
    database_type: DatabaseType,
    is_primary_key: bool = False,
) -> ast.FieldDefinitionNode:
    type_node: ast.TypeNode = named_type(graphql_type_name(column.system_type))
    if not column.is_nullable:
        type_node = non_null(type_node)

    directives = []
    if is_primary_key:
        directives.append(build_directive(PRIMARY_KEY_DIRECTIVE, databaseType=database_type.value))
    if column.is_auto_generated or column.is_read_only:
        directives.append(build_directive(AUTO_GENERATED_DIRECTIVE))
    if column.has_default:
        default = "" if column.default_value is None else column.default_value
        directives.append(build_directive(DEFAULT_VALUE_DIRECTIVE, value=default))

    return ast.FieldDefinitionNode(
        name=name_node(column.name),
        description=None,
        arguments=(),
        type=type_node,
        directives=tuple(directives),
    )


def _document_id_field(database_type: DatabaseType) -> ast.FieldDefinitionNode:
    return ast.FieldDefinitionNode(
        name=name_node(ID_ARGUMENT_NAME),
        description=None,
        arguments=(),
        type=non_null(named_type("ID")),
        directives=(build_directive(PRIMARY_KEY_DIRECTIVE, databaseType=database_type.value),),
    )


def build_object_type(
    entity: Entity,
    db_object: Optional[DatabaseObject],
    database_type: DatabaseType,
) -> ast.ObjectTypeDefinitionNode:
    """
    Object type for one entity.

    A stored procedure exposes its result set columns. A missing stored
    procedure descriptor yields a type without fields; the synthesis pass
    reports that condition.
    """
    fields: list[ast.FieldDefinitionNode] = []
    if isinstance(db_object, DatabaseStoredProcedure):
        fields.extend(_column_field(column, database_type) for column in db_object.result_columns)
    elif db_object is not None:
        primary_keys = set(db_object.primary_keys or entity.source.key_fields)
        if not database_type.is_relational and db_object.get_column(ID_ARGUMENT_NAME) is None:
            fields.append(_document_id_field(database_type))
        for column in db_object.columns:
            is_key = (
                column.name in primary_keys
                if database_type.is_relational
                else column.name == ID_ARGUMENT_NAME
            )
            fields.append(_column_field(column, database_type, is_primary_key=is_key))

    return ast.ObjectTypeDefinitionNode(
        name=name_node(get_defined_singular_name(entity)),
        description=None,
        interfaces=(),
        directives=(build_directive(MODEL_DIRECTIVE, **{MODEL_NAME_ARGUMENT: entity.name}),),
        fields=tuple(fields),
    )


def build_base_document(
    entities: Mapping[str, Entity],
    database_objects: Mapping[str, DatabaseObject],
    database_type: DatabaseType,
) -> ast.DocumentNode:
    """
    Build the base schema document for every GraphQL-enabled entity.

    Raises:
        InitializationError: A table or view entity has no descriptor.
    """
    definitions = []
    for entity in entities.values():
        if not entity.graphql.enabled:
            continue
        db_object = database_objects.get(entity.name)
        if db_object is None and not entity.is_stored_procedure:
            raise InitializationError(
                f"The database object for entity '{entity.name}' "
                f"({entity.source.object}) has no schema metadata."
            )
        definitions.append(build_object_type(entity, db_object, database_type))

    logger.debug("Built base schema with %d object types", len(definitions))
    return ast.DocumentNode(definitions=tuple(definitions))
