"""
Permission index and authorization resolver.

The permission map is a sparse relation (entity, operation) -> roles built once
per configuration snapshot. Lookups never fail: an entity or operation nobody
was granted simply resolves to an empty role set.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Iterable, Optional, Union

from ..entities.types import (
    STORED_PROCEDURE_OPERATIONS,
    TABLE_OPERATIONS,
    Entity,
    EntityActionOperation,
)

logger = logging.getLogger(__name__)

_EMPTY_ROLES: frozenset[str] = frozenset()


def _normalize_operation(operation: EntityActionOperation) -> EntityActionOperation:
    if operation is EntityActionOperation.UPDATE_GRAPHQL:
        return EntityActionOperation.UPDATE
    return operation


class EntityPermissionMap(Mapping):
    """
    Immutable entity name -> (operation -> roles) mapping.

    Duplicate grants collapse into a single role entry. Role names are
    compared case-sensitively unless ``case_insensitive`` is set, in which
    case they are case-folded for comparison only. ``roles_for`` always
    returns the configured spelling.
    """

    def __init__(
        self,
        grants: Mapping[str, Mapping[EntityActionOperation, Iterable[str]]],
        case_insensitive: bool = False,
    ):
        self.case_insensitive = case_insensitive
        frozen: dict[str, Mapping[EntityActionOperation, frozenset[str]]] = {}
        folded: dict[tuple[str, EntityActionOperation], frozenset[str]] = {}
        for entity_name, operations in grants.items():
            frozen[entity_name] = MappingProxyType(
                {operation: frozenset(roles) for operation, roles in operations.items()}
            )
            for operation, roles in frozen[entity_name].items():
                folded[(entity_name, operation)] = frozenset(
                    self.normalize_role(role) for role in roles
                )
        self._grants = MappingProxyType(frozen)
        self._folded = MappingProxyType(folded)

    def __getitem__(self, entity_name: str) -> Mapping[EntityActionOperation, frozenset[str]]:
        return self._grants[entity_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._grants)

    def __len__(self) -> int:
        return len(self._grants)

    def normalize_role(self, role: str) -> str:
        return role.casefold() if self.case_insensitive else role

    def roles_for(self, entity_name: str, operation: EntityActionOperation) -> frozenset[str]:
        operations = self._grants.get(entity_name)
        if operations is None:
            return _EMPTY_ROLES
        return operations.get(_normalize_operation(operation), _EMPTY_ROLES)

    def allows(self, role: str, entity_name: str, operation: EntityActionOperation) -> bool:
        key = (entity_name, _normalize_operation(operation))
        return self.normalize_role(role) in self._folded.get(key, _EMPTY_ROLES)


def build_permission_map(
    entities: Union[Iterable[Entity], Mapping[str, Entity]],
    case_insensitive: bool = False,
) -> EntityPermissionMap:
    """
    Build the permission index from entity permission configuration.

    The ``*`` action expands to every operation valid for the entity's source
    type: create/read/update/delete for tables and views, execute for stored
    procedures.

    Args:
        entities: Entities (or an entity-name keyed mapping) to index.
        case_insensitive: Case-fold role names.

    Returns:
        A new EntityPermissionMap.
    """
    if isinstance(entities, Mapping):
        entities = entities.values()

    grants: dict[str, dict[EntityActionOperation, set[str]]] = {}
    for entity in entities:
        valid_operations = (
            STORED_PROCEDURE_OPERATIONS if entity.is_stored_procedure else TABLE_OPERATIONS
        )
        operations = grants.setdefault(entity.name, {})
        for permission in entity.permissions:
            for action in permission.actions:
                if action is EntityActionOperation.ALL:
                    granted = valid_operations
                elif action in valid_operations:
                    granted = (action,)
                else:
                    logger.warning(
                        "Ignoring action '%s' for role '%s' on entity '%s'",
                        action.value,
                        permission.role,
                        entity.name,
                    )
                    continue
                for operation in granted:
                    operations.setdefault(operation, set()).add(permission.role)

    permission_map = EntityPermissionMap(grants, case_insensitive=case_insensitive)
    logger.debug("Built permission map for %d entities", len(permission_map))
    return permission_map


def get_roles_for_operation(
    entity_name: str,
    operation: EntityActionOperation,
    permission_map: Optional[EntityPermissionMap] = None,
) -> frozenset[str]:
    """
    Return the roles authorized to perform ``operation`` on ``entity_name``.

    A missing permission map means nobody is authorized for anything.
    """
    if permission_map is None:
        return _EMPTY_ROLES
    return permission_map.roles_for(entity_name, operation)


class AuthorizationResolver:
    """
    Query surface over the permission map for request-time checks.

    The caller's role is always passed in explicitly; the resolver holds no
    per-request state.
    """

    def __init__(self, permission_map: Optional[EntityPermissionMap] = None):
        if permission_map is None:
            permission_map = EntityPermissionMap({})
        self.permission_map = permission_map

    def entity_exists(self, entity_name: str) -> bool:
        return entity_name in self.permission_map

    def roles_for(self, entity_name: str, operation: EntityActionOperation) -> frozenset[str]:
        return get_roles_for_operation(entity_name, operation, self.permission_map)

    def is_role_allowed(
        self, role: Optional[str], entity_name: str, operation: EntityActionOperation
    ) -> bool:
        if not role:
            return False
        return self.permission_map.allows(role, entity_name, operation)
