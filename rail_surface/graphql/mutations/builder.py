"""
Mutation type synthesis.

This module provides the MutationBuilder class, which turns the entity-backed
object types of a base schema into the authorized Mutation root type and the
input types its fields reference.

For each entity-backed type:
- A stored procedure exposed as a mutation gets exactly one ``execute`` field
  when at least one role may execute it.
- A table or view gets independent create, update and delete fields, each
  restricted to the roles granted that operation. Operations nobody was
  granted are left out.

When no field is authorized, no Mutation type is emitted at all.
"""

import logging
from typing import Mapping, Optional

from graphql.language import ast

from ...entities.types import (
    MUTATION_OPERATIONS,
    DatabaseObject,
    DatabaseType,
    Entity,
    EntityActionOperation,
    GraphQLOperation,
)
from ...security.authorization import EntityPermissionMap, get_roles_for_operation
from ..fields import resolve_entity, resolve_stored_procedure
from ..fragments import SchemaFragment, SynthesizedField, build_fragment
from ..naming import (
    CREATE_MUTATION_PREFIX,
    EXECUTE_MUTATION_PREFIX,
    UPDATE_MUTATION_PREFIX,
    is_model_type,
)
from ..stored_procedure import build_stored_procedure_field
from .create import build_create_mutation
from .delete import build_delete_mutation
from .update import build_update_mutation

logger = logging.getLogger(__name__)

MUTATION_TYPE_NAME = "Mutation"

# Evaluated in order; the first matching prefix wins and anything that
# matches none of them is a delete.
MUTATION_OPERATION_RULES = (
    (EXECUTE_MUTATION_PREFIX, EntityActionOperation.EXECUTE),
    (CREATE_MUTATION_PREFIX, EntityActionOperation.CREATE),
    (UPDATE_MUTATION_PREFIX, EntityActionOperation.UPDATE_GRAPHQL),
)


def classify_mutation_operation(name: str) -> EntityActionOperation:
    """
    Determine the operation of a mutation field or input type from its name.

    e.g. ``createBook`` resolves to CREATE and ``UpdateBookInput`` to
    UPDATE_GRAPHQL. Matching is case-insensitive.
    """
    lowered = name.lower()
    for prefix, operation in MUTATION_OPERATION_RULES:
        if lowered.startswith(prefix):
            return operation
    return EntityActionOperation.DELETE


class MutationBuilder:
    """
    Builds the Mutation root type for one synthesis pass.

    The builder only reads its inputs; every call to ``build`` starts from
    empty accumulators and returns a new SchemaFragment.
    """

    def __init__(
        self,
        database_type: DatabaseType,
        entities: Mapping[str, Entity],
        permission_map: Optional[EntityPermissionMap] = None,
        database_objects: Optional[Mapping[str, DatabaseObject]] = None,
    ):
        """
        Args:
            database_type: Target database dialect.
            entities: Entity metadata keyed by entity name.
            permission_map: Permission index; None authorizes nothing.
            database_objects: Introspected descriptors keyed by entity name.
        """
        self.database_type = database_type
        self.entities = entities
        self.permission_map = permission_map
        self.database_objects = database_objects

    def build(self, root: ast.DocumentNode) -> SchemaFragment:
        """
        Build the Mutation type from the base schema ``root``.

        Raises:
            InitializationError: An object type has no entity metadata, or a
                stored procedure exposed as a mutation has no descriptor.
        """
        fields: list[SynthesizedField] = []
        inputs: dict[str, ast.InputObjectTypeDefinitionNode] = {}

        for definition in root.definitions:
            if not is_model_type(definition):
                continue
            entity = resolve_entity(definition, self.entities)
            if not entity.graphql.enabled:
                logger.debug("GraphQL disabled for entity %s, skipping mutations", entity.name)
                continue

            if entity.is_stored_procedure:
                # Stored procedures get a single field, never the CRUD fan-out.
                if entity.graphql_operation is GraphQLOperation.MUTATION:
                    self._add_stored_procedure_mutation(definition, entity, fields)
                continue

            for operation in MUTATION_OPERATIONS:
                self._add_mutation(definition, root, entity, operation, inputs, fields)

        fragment = build_fragment(MUTATION_TYPE_NAME, fields, inputs)
        logger.info(
            "Synthesized %d mutation fields and %d input types",
            len(fragment.fields),
            len(fragment.types),
        )
        return fragment

    def _add_mutation(
        self,
        object_type: ast.ObjectTypeDefinitionNode,
        root: ast.DocumentNode,
        entity: Entity,
        operation: EntityActionOperation,
        inputs: dict[str, ast.InputObjectTypeDefinitionNode],
        fields: list[SynthesizedField],
    ) -> None:
        roles = get_roles_for_operation(entity.name, operation, self.permission_map)
        if not roles:
            logger.debug("No roles may %s %s, omitting field", operation.value, entity.name)
            return

        if operation is EntityActionOperation.CREATE:
            definition = build_create_mutation(
                object_type, root, self.database_type, entity, roles, inputs
            )
        elif operation is EntityActionOperation.UPDATE:
            definition = build_update_mutation(
                object_type, root, self.database_type, entity, roles, inputs
            )
        elif operation is EntityActionOperation.DELETE:
            definition = build_delete_mutation(object_type, self.database_type, entity, roles)
        else:
            raise ValueError(f"Invalid mutation operation: {operation!r}")

        fields.append(
            SynthesizedField(
                name=definition.name.value,
                entity_name=entity.name,
                operation=operation,
                roles=roles,
                definition=definition,
            )
        )

    def _add_stored_procedure_mutation(
        self,
        object_type: ast.ObjectTypeDefinitionNode,
        entity: Entity,
        fields: list[SynthesizedField],
    ) -> None:
        db_object = resolve_stored_procedure(entity, self.database_objects)
        roles = get_roles_for_operation(
            entity.name, EntityActionOperation.EXECUTE, self.permission_map
        )
        if not roles:
            logger.debug("No roles may execute %s, omitting field", entity.name)
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
