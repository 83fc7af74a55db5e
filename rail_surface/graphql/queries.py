"""
Query type synthesis.

Tables and views readable by at least one role get a paginated list field and
a by-primary-key field. Stored procedures configured as queries get a single
``execute`` field under the roles allowed to execute them.
"""

import logging
from typing import Mapping, Optional

from graphql.language import ast

from ..entities.types import (
    DatabaseObject,
    DatabaseType,
    Entity,
    EntityActionOperation,
    GraphQLOperation,
)
from ..security.authorization import EntityPermissionMap, get_roles_for_operation
from .fields import (
    description_node,
    field_definition,
    input_value,
    primary_key_arguments,
    resolve_entity,
    resolve_stored_procedure,
)
from .fragments import SchemaFragment, SynthesizedField, build_fragment
from .naming import (
    PK_QUERY_SUFFIX,
    connection_type_name,
    format_name_for_field,
    get_defined_plural_name,
    get_defined_singular_name,
    is_model_type,
    list_of,
    name_node,
    named_type,
    non_null,
)
from .stored_procedure import build_stored_procedure_field

logger = logging.getLogger(__name__)

QUERY_TYPE_NAME = "Query"
PAGE_SIZE_ARGUMENT = "first"
PAGINATION_TOKEN_ARGUMENT = "after"


def build_connection_type(object_type: ast.ObjectTypeDefinitionNode, entity: Entity) -> ast.ObjectTypeDefinitionNode:
    """``<Type>Connection { items: [<Type>!]! endCursor: String hasNextPage: Boolean! }``"""

    def _field(name: str, type_node: ast.TypeNode, description: str) -> ast.FieldDefinitionNode:
        return ast.FieldDefinitionNode(
            name=name_node(name),
            description=description_node(description),
            arguments=(),
            type=type_node,
            directives=(),
        )

    return ast.ObjectTypeDefinitionNode(
        name=name_node(connection_type_name(entity)),
        description=description_node(f"The return object from a filter query that supports a pagination token for paging through results of {object_type.name.value}"),
        interfaces=(),
        directives=(),
        fields=(
            _field("items", non_null(list_of(non_null(named_type(object_type.name.value)))), "The list of items that matched the filter"),
            _field("endCursor", named_type("String"), "A pagination token to provide to subsequent pages of a query"),
            _field("hasNextPage", non_null(named_type("Boolean")), "Indicates if there are more pages of items to return"),
        ),
    )


class QueryBuilder:
    """Builds the Query root type for one synthesis pass."""

    def __init__(
        self,
        database_type: DatabaseType,
        entities: Mapping[str, Entity],
        permission_map: Optional[EntityPermissionMap] = None,
        database_objects: Optional[Mapping[str, DatabaseObject]] = None,
    ):
        self.database_type = database_type
        self.entities = entities
        self.permission_map = permission_map
        self.database_objects = database_objects

    def build(self, root: ast.DocumentNode) -> SchemaFragment:
        fields: list[SynthesizedField] = []
        types: dict[str, ast.TypeDefinitionNode] = {}

        for definition in root.definitions:
            if not is_model_type(definition):
                continue
            entity = resolve_entity(definition, self.entities)
            if not entity.graphql.enabled:
                continue

            if entity.is_stored_procedure:
                if entity.graphql_operation is GraphQLOperation.QUERY:
                    self._add_stored_procedure_query(definition, entity, fields)
                continue

            roles = get_roles_for_operation(entity.name, EntityActionOperation.READ, self.permission_map)
            if not roles:
                logger.debug("No roles may read %s, omitting query fields", entity.name)
                continue
            self._add_read_queries(definition, entity, roles, types, fields)

        fragment = build_fragment(QUERY_TYPE_NAME, fields, types)
        logger.info("Synthesized %d query fields", len(fragment.fields))
        return fragment

    def _add_read_queries(
        self,
        object_type: ast.ObjectTypeDefinitionNode,
        entity: Entity,
        roles: frozenset[str],
        types: dict[str, ast.TypeDefinitionNode],
        fields: list[SynthesizedField],
    ) -> None:
        connection_name = connection_type_name(entity)
        if connection_name not in types:
            types[connection_name] = build_connection_type(object_type, entity)

        list_field = field_definition(
            format_name_for_field(get_defined_plural_name(entity)),
            non_null(named_type(connection_name)),
            (
                input_value(PAGE_SIZE_ARGUMENT, named_type("Int"), "The number of items to return from the page start point"),
                input_value(PAGINATION_TOKEN_ARGUMENT, named_type("String"), "A pagination token from a previous query to continue through a paginated list"),
            ),
            roles,
            f"Get a list of all the {object_type.name.value} items from the database",
        )
        pk_field = field_definition(
            f"{format_name_for_field(get_defined_singular_name(entity))}{PK_QUERY_SUFFIX}",
            named_type(object_type.name.value),
            primary_key_arguments(object_type, entity, self.database_type, "read"),
            roles,
            f"Get a {object_type.name.value} from the database by its ID/primary key",
        )
        for definition in (list_field, pk_field):
            fields.append(
                SynthesizedField(
                    name=definition.name.value,
                    entity_name=entity.name,
                    operation=EntityActionOperation.READ,
                    roles=roles,
                    definition=definition,
                )
            )

    def _add_stored_procedure_query(
        self,
        object_type: ast.ObjectTypeDefinitionNode,
        entity: Entity,
        fields: list[SynthesizedField],
    ) -> None:
        db_object = resolve_stored_procedure(entity, self.database_objects)
        roles = get_roles_for_operation(entity.name, EntityActionOperation.EXECUTE, self.permission_map)
        if not roles:
            return
        definition = build_stored_procedure_field(object_type, entity, db_object, roles)
        fields.append(
            SynthesizedField(
                name=definition.name.value,
                entity_name=entity.name,
                operation=EntityActionOperation.EXECUTE,
                roles=roles,
                definition=definition,
            )
        )
