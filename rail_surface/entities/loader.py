"""
Build entity metadata and database object descriptors from in-memory mappings.

The mappings are the shape stored under ``RAIL_SURFACE["entities"]`` and
``RAIL_SURFACE["database_objects"]`` in Django settings. Malformed entries are
logged and skipped; semantic errors (for example a stored procedure granted a
CRUD action) raise ConfigurationError.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..core.exceptions import ConfigurationError
from .registry import RuntimeEntities
from .types import (
    ColumnDefinition,
    DatabaseObject,
    DatabaseStoredProcedure,
    DatabaseTable,
    DatabaseView,
    Entity,
    EntityActionOperation,
    EntityGraphQLOptions,
    EntityPermission,
    EntityRestOptions,
    EntitySource,
    EntitySourceType,
    GraphQLOperation,
    ParameterDefinition,
)

logger = logging.getLogger(__name__)

_STORED_PROCEDURE_ACTIONS = {EntityActionOperation.EXECUTE, EntityActionOperation.ALL}


def load_runtime_entities(payload: Optional[Mapping[str, Any]]) -> RuntimeEntities:
    """
    Build RuntimeEntities from an entity-name keyed mapping.

    Args:
        payload: Mapping of entity name to entity configuration.

    Returns:
        A new, immutable RuntimeEntities instance.
    """
    if not payload:
        return RuntimeEntities()
    if not isinstance(payload, Mapping):
        raise ConfigurationError("Entity configuration must be a mapping of entity names.")

    entities = []
    for name, config in payload.items():
        if not isinstance(config, Mapping):
            logger.warning("Entity '%s' configuration must be an object", name)
            continue
        entity = _build_entity(str(name), config)
        if entity is not None:
            entities.append(entity)
    return RuntimeEntities(entities)


def load_database_objects(
    payload: Optional[Mapping[str, Any]],
    entities: Optional[RuntimeEntities] = None,
) -> dict[str, DatabaseObject]:
    """
    Build database object descriptors keyed by entity name.

    Stored procedure parameters pick up the defaults declared in the entity's
    ``source.parameters`` configuration.
    """
    if not payload:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigurationError("Database object configuration must be a mapping of entity names.")

    db_objects: dict[str, DatabaseObject] = {}
    for entity_name, config in payload.items():
        if not isinstance(config, Mapping):
            logger.warning("Database object for '%s' must be an object", entity_name)
            continue
        entity = entities.get(entity_name) if entities is not None else None
        db_object = _build_database_object(str(entity_name), config, entity)
        if db_object is not None:
            db_objects[str(entity_name)] = db_object
    return db_objects


def _build_entity(name: str, config: Mapping[str, Any]) -> Optional[Entity]:
    source = _build_source(name, config.get("source"))
    if source is None:
        return None

    permissions = tuple(
        _build_permission(name, source.type, entry)
        for entry in _coerce_list_of_mappings(config.get("permissions"), name, "permissions")
    )
    return Entity(
        name=name,
        source=source,
        graphql=_build_graphql_options(name, config.get("graphql", True)),
        rest=_build_rest_options(config.get("rest", True)),
        permissions=tuple(permission for permission in permissions if permission is not None),
    )


def _build_source(name: str, value: Any) -> Optional[EntitySource]:
    if isinstance(value, str) and value:
        return EntitySource(object=value)
    if not isinstance(value, Mapping) or not value.get("object"):
        logger.warning("Entity '%s' is missing its source object", name)
        return None

    source_type = _coerce_source_type(value.get("type"))
    if source_type is None:
        raise ConfigurationError(
            f"Entity '{name}' has an unsupported source type: {value.get('type')!r}."
        )
    parameters = value.get("parameters") or {}
    if not isinstance(parameters, Mapping):
        logger.warning("Source parameters of entity '%s' must be an object", name)
        parameters = {}
    return EntitySource(
        object=str(value["object"]),
        type=source_type,
        parameters=tuple((str(key), item) for key, item in parameters.items()),
        key_fields=tuple(_coerce_list(value.get("key_fields"))),
    )


def _build_graphql_options(name: str, value: Any) -> EntityGraphQLOptions:
    if isinstance(value, bool):
        return EntityGraphQLOptions(enabled=value)
    if isinstance(value, str):
        return EntityGraphQLOptions(singular=value)
    if not isinstance(value, Mapping):
        return EntityGraphQLOptions()

    singular = plural = None
    type_config = value.get("type")
    if isinstance(type_config, str):
        singular = type_config
    elif isinstance(type_config, Mapping):
        singular = type_config.get("singular")
        plural = type_config.get("plural")

    operation = None
    if value.get("operation") is not None:
        try:
            operation = GraphQLOperation(str(value["operation"]).lower())
        except ValueError:
            raise ConfigurationError(
                f"Entity '{name}' has an unsupported GraphQL operation: {value['operation']!r}."
            )
    return EntityGraphQLOptions(
        enabled=bool(value.get("enabled", True)),
        singular=singular,
        plural=plural,
        operation=operation,
    )


def _build_rest_options(value: Any) -> EntityRestOptions:
    if isinstance(value, bool):
        return EntityRestOptions(enabled=value)
    if isinstance(value, str):
        return EntityRestOptions(path=value)
    if not isinstance(value, Mapping):
        return EntityRestOptions()
    return EntityRestOptions(
        enabled=bool(value.get("enabled", True)),
        path=value.get("path"),
        methods=tuple(method.upper() for method in _coerce_list(value.get("methods"))),
    )


def _build_permission(
    entity_name: str,
    source_type: EntitySourceType,
    entry: Mapping[str, Any],
) -> Optional[EntityPermission]:
    role = entry.get("role")
    if not role or not isinstance(role, str):
        logger.warning("Permission entry missing role on entity '%s'", entity_name)
        return None

    actions = []
    for raw_action in entry.get("actions") or []:
        if isinstance(raw_action, Mapping):
            raw_action = raw_action.get("action")
        operation = _coerce_operation(raw_action)
        if operation is None or operation is EntityActionOperation.UPDATE_GRAPHQL:
            raise ConfigurationError(
                f"Entity '{entity_name}' grants an unsupported action {raw_action!r} to role '{role}'."
            )
        if (
            source_type is EntitySourceType.STORED_PROCEDURE
            and operation not in _STORED_PROCEDURE_ACTIONS
        ):
            raise ConfigurationError(
                f"Stored procedure entity '{entity_name}' only supports the execute action; "
                f"role '{role}' was granted '{operation.value}'."
            )
        if source_type is not EntitySourceType.STORED_PROCEDURE and operation is EntityActionOperation.EXECUTE:
            raise ConfigurationError(
                f"Entity '{entity_name}' is not a stored procedure and cannot grant execute to role '{role}'."
            )
        actions.append(operation)
    return EntityPermission(role=role, actions=tuple(actions))


def _build_database_object(
    entity_name: str,
    config: Mapping[str, Any],
    entity: Optional[Entity],
) -> Optional[DatabaseObject]:
    if config.get("type") is None and entity is not None:
        source_type = entity.source.type
    else:
        source_type = _coerce_source_type(config.get("type"))
    if source_type is None:
        logger.warning("Database object for '%s' has no recognizable type", entity_name)
        return None

    schema_name, object_name = _split_object_name(config, entity)
    if source_type is EntitySourceType.STORED_PROCEDURE:
        defaults = dict(entity.source.parameters) if entity is not None else {}
        parameters = []
        for item in _coerce_list_of_mappings(config.get("parameters"), entity_name, "parameters"):
            parameter_name = str(item.get("name", ""))
            if not parameter_name:
                logger.warning("Stored procedure parameter without name on '%s'", entity_name)
                continue
            parameters.append(
                ParameterDefinition(
                    name=parameter_name,
                    system_type=str(item.get("type", "str")),
                    has_config_default=parameter_name in defaults,
                    config_default_value=defaults.get(parameter_name),
                )
            )
        return DatabaseStoredProcedure(
            schema_name=schema_name,
            name=object_name,
            parameters=tuple(parameters),
            result_columns=_build_columns(entity_name, config.get("result_columns")),
        )

    columns = _build_columns(entity_name, config.get("columns"))
    primary_keys = tuple(_coerce_list(config.get("primary_keys")))
    if not primary_keys and entity is not None:
        primary_keys = entity.source.key_fields
    descriptor_class = DatabaseView if source_type is EntitySourceType.VIEW else DatabaseTable
    return descriptor_class(
        schema_name=schema_name,
        name=object_name,
        columns=columns,
        primary_keys=primary_keys,
    )


def _build_columns(entity_name: str, value: Any) -> tuple[ColumnDefinition, ...]:
    columns = []
    for item in _coerce_list_of_mappings(value, entity_name, "columns"):
        column_name = str(item.get("name", ""))
        if not column_name:
            logger.warning("Column without name on '%s'", entity_name)
            continue
        columns.append(
            ColumnDefinition(
                name=column_name,
                system_type=str(item.get("type", "str")),
                is_nullable=bool(item.get("nullable", False)),
                is_auto_generated=bool(item.get("auto_generated", False)),
                has_default="default" in item,
                default_value=item.get("default"),
                is_read_only=bool(item.get("read_only", False)),
            )
        )
    return tuple(columns)


def _split_object_name(
    config: Mapping[str, Any], entity: Optional[Entity]
) -> tuple[str, str]:
    if config.get("name"):
        return str(config.get("schema", "")), str(config["name"])
    full_name = entity.source.object if entity is not None else ""
    schema_name, _, object_name = full_name.rpartition(".")
    return schema_name, object_name


def _coerce_source_type(value: Any) -> Optional[EntitySourceType]:
    if isinstance(value, EntitySourceType):
        return value
    if value is None:
        return EntitySourceType.TABLE
    key = str(value).strip().lower().replace("_", "-")
    mapping = {
        "table": EntitySourceType.TABLE,
        "view": EntitySourceType.VIEW,
        "stored-procedure": EntitySourceType.STORED_PROCEDURE,
    }
    return mapping.get(key)


def _coerce_operation(value: Any) -> Optional[EntityActionOperation]:
    if isinstance(value, EntityActionOperation):
        return value
    try:
        return EntityActionOperation(str(value).strip().lower())
    except ValueError:
        return None


def _coerce_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(item) for item in value if item is not None]
    return [str(value)]


def _coerce_list_of_mappings(value: Any, entity_name: str, section: str) -> list[Mapping[str, Any]]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning("Section '%s' of '%s' must be a list", section, entity_name)
        return []
    normalized = []
    for entry in value:
        if not isinstance(entry, Mapping):
            logger.warning("Entry in '%s' of '%s' must be an object", section, entity_name)
            continue
        normalized.append(entry)
    return normalized
