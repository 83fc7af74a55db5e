"""
REST route resolution.

``resolve_route`` splits an inbound request path into the entity path segment
and the primary key route that follows it. It is a pure function and performs
no authorization.

``RestRouter`` builds on it for one configuration snapshot: it maps the
entity path segment to a configured entity, derives the operation from the
HTTP verb and checks the caller's role, which is always passed explicitly.
"""

import logging
from typing import NamedTuple, Optional

from ..core.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    MethodNotAllowedError,
    RouteError,
)
from ..entities.registry import RuntimeEntities
from ..entities.types import Entity, EntityActionOperation
from ..security.authorization import AuthorizationResolver, EntityPermissionMap
from ..security.snapshot import SurfaceSnapshot

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"

# Verbs accepted on tables and views.
HTTP_METHOD_OPERATIONS = {
    "GET": EntityActionOperation.READ,
    "POST": EntityActionOperation.CREATE,
    "PUT": EntityActionOperation.UPDATE,
    "PATCH": EntityActionOperation.UPDATE,
    "DELETE": EntityActionOperation.DELETE,
}
DEFAULT_STORED_PROCEDURE_METHODS = ("POST",)


class RouteResolution(NamedTuple):
    """Entity path segment and primary key route of one request path."""

    entity_path: str
    primary_key_route: str


class RestRequest(NamedTuple):
    """A resolved and authorized REST request."""

    entity_name: str
    primary_key_route: str
    operation: EntityActionOperation


def resolve_route(full_path: str, configured_prefix: str) -> RouteResolution:
    """
    Strip ``configured_prefix`` from ``full_path`` and split the remainder.

    The prefix must start with ``/`` and match the path, normalized to a single
    leading ``/``, exactly and case-sensitively up to a segment boundary.
    Spaces and punctuation are ordinary path characters.

    Examples:
        resolve_route("rest-api/Book/id/1", "/rest-api")
        -> RouteResolution("Book", "id/1")

        resolve_route("/foo/bar", "foo")
        -> RouteError("Invalid Path for route: /foo/bar.")

    Raises:
        RouteError: The path does not start with the prefix or has no entity
            segment after it.
    """
    if not configured_prefix or not configured_prefix.startswith(PATH_SEPARATOR):
        raise RouteError(full_path)

    path = PATH_SEPARATOR + full_path.lstrip(PATH_SEPARATOR)
    prefix = configured_prefix.rstrip(PATH_SEPARATOR)
    if not path.startswith(prefix):
        raise RouteError(full_path)

    remainder = path[len(prefix):]
    if not remainder.startswith(PATH_SEPARATOR):
        # Either nothing follows the prefix or the match ends mid-segment.
        raise RouteError(full_path)

    entity_path, _, primary_key_route = remainder[1:].partition(PATH_SEPARATOR)
    if not entity_path:
        raise RouteError(full_path)
    return RouteResolution(entity_path, primary_key_route)


class RestRouter:
    """
    Request-time routing over one configuration snapshot.

    Instances hold only immutable snapshot data and are safe to share
    between concurrent requests.
    """

    def __init__(
        self,
        prefix: str,
        entities: RuntimeEntities,
        permission_map: Optional[EntityPermissionMap] = None,
    ):
        self.prefix = prefix
        self.entities = entities
        self.authorization_resolver = AuthorizationResolver(permission_map)

    @classmethod
    def from_snapshot(cls, snapshot: SurfaceSnapshot, prefix: str) -> "RestRouter":
        return cls(prefix, snapshot.entities, snapshot.permission_map)

    def resolve(self, full_path: str) -> tuple[Entity, str]:
        """
        Resolve a request path to its entity and primary key route.

        Raises:
            RouteError: The path does not match the prefix.
            EntityNotFoundError: No REST-enabled entity uses the path segment.
        """
        entity_path, primary_key_route = resolve_route(full_path, self.prefix)
        entity_name = self.entities.get_entity_name_from_path(entity_path)
        if entity_name is None:
            raise EntityNotFoundError(entity_path)
        return self.entities[entity_name], primary_key_route

    def operation_for(self, entity: Entity, method: str) -> EntityActionOperation:
        """
        Map an HTTP verb to the operation it performs on ``entity``.

        Stored procedures are executed by any of their configured verbs
        (POST when none are configured).
        """
        verb = method.upper()
        if entity.is_stored_procedure:
            if verb in (entity.rest.methods or DEFAULT_STORED_PROCEDURE_METHODS):
                return EntityActionOperation.EXECUTE
            raise MethodNotAllowedError(verb)
        operation = HTTP_METHOD_OPERATIONS.get(verb)
        if operation is None:
            raise MethodNotAllowedError(verb)
        return operation

    def authorize(self, role: Optional[str], entity_name: str, operation: EntityActionOperation) -> None:
        """
        Raises:
            AuthorizationError: ``role`` is not granted ``operation``.
        """
        if not self.authorization_resolver.is_role_allowed(role, entity_name, operation):
            logger.debug("Role %r denied %s on %s", role, operation.value, entity_name)
            raise AuthorizationError(role or "", entity_name, operation)

    def dispatch(self, full_path: str, method: str, role: Optional[str]) -> RestRequest:
        """Resolve, classify and authorize a request in that order."""
        entity, primary_key_route = self.resolve(full_path)
        operation = self.operation_for(entity, method)
        self.authorize(role, entity.name, operation)
        return RestRequest(entity.name, primary_key_route, operation)
