"""
Stored procedure field builder, shared by the Query and Mutation builders.
"""

import logging

from graphql.language import ast

from ..entities.types import DatabaseStoredProcedure, Entity
from .fields import field_definition, input_value
from .naming import EXECUTE_MUTATION_PREFIX, list_of, mutation_field_name, named_type, non_null
from .scalars import coerce_default, graphql_type_name, value_node

logger = logging.getLogger(__name__)


def build_stored_procedure_field(
    object_type: ast.ObjectTypeDefinitionNode,
    entity: Entity,
    db_object: DatabaseStoredProcedure,
    roles: frozenset[str],
) -> ast.FieldDefinitionNode:
    """
    ``execute<Type>(<parameters>): [<Type>!]!``

    One argument per procedure parameter. A parameter with a configured
    default is optional and carries that default; the others are required.
    """
    arguments = []
    for parameter in db_object.parameters:
        type_name = graphql_type_name(parameter.system_type)
        if parameter.has_config_default:
            arguments.append(
                input_value(
                    parameter.name,
                    named_type(type_name),
                    f"parameters for {entity.name} stored-procedure",
                    value_node(coerce_default(parameter.config_default_value, type_name)),
                )
            )
        else:
            arguments.append(
                input_value(
                    parameter.name,
                    non_null(named_type(type_name)),
                    f"parameters for {entity.name} stored-procedure",
                )
            )

    logger.debug(
        "Built stored procedure field for %s with %d parameters",
        entity.name,
        len(arguments),
    )
    return field_definition(
        mutation_field_name(EXECUTE_MUTATION_PREFIX, entity),
        non_null(list_of(non_null(named_type(object_type.name.value)))),
        arguments,
        roles,
        f"Execute Stored-Procedure {object_type.name.value} and get results from the database",
    )
